"""
Database initialization and demo seed script.
"""
import logging
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from app.core.security import get_password_hash
from app.core.utils import utcnow
from app.db.session import SessionLocal, init_db
from app.models import ApprovalTask, Expense, ExpenseStatus, ExpenseTimelineEvent, User, UserRole
from app.services.fx_service import convert_to_company, get_company_currency
from app.services.sequence_service import next_id, USERS, EXPENSES, APPROVAL_TASKS

logger = logging.getLogger(__name__)


def _seed_user(db: Session, name: str, email: str, role: UserRole, password: str, manager_id=None) -> User:
    user = User(
        id=next_id(USERS, db),
        name=name,
        email=email,
        role=role,
        manager_id=manager_id,
        hashed_password=get_password_hash(password),
        reset_required=False,
    )
    db.add(user)
    db.flush()
    return user


def _seed_expense(
    db: Session,
    employee: User,
    spend_date: date,
    category: str,
    amount: Decimal,
    currency: str,
    description: str,
    status: ExpenseStatus,
    comment: str
) -> Expense:
    company_currency = get_company_currency()
    expense = Expense(
        id=next_id(EXPENSES, db),
        employee_id=employee.id,
        employee_name=employee.display_name,
        spend_date=spend_date,
        category=category,
        amount=amount,
        currency=currency,
        amount_company_ccy=convert_to_company(amount, currency, company_currency),
        company_currency=company_currency,
        status=status,
        description=description,
    )
    expense.timeline.append(ExpenseTimelineEvent(
        at=utcnow(), decision="submitted", by_user_id=employee.id, comment=comment
    ))
    db.add(expense)
    db.flush()
    return expense


def seed_if_empty(db: Session) -> bool:
    """Insert demo users, expenses and one open task when there are no users."""
    if db.query(User).count() > 0:
        return False

    _seed_user(db, "Admin", "admin@hack.co", UserRole.ADMIN, "admin123")
    manager = _seed_user(db, "John Manager", "john@hack.co", UserRole.MANAGER, "manager123")
    employee = _seed_user(
        db, "Sarah Employee", "sarah@hack.co", UserRole.EMPLOYEE, "employee123", manager_id=manager.id
    )

    travel = _seed_expense(
        db, employee, date(2024, 1, 15), "Travel", Decimal("450"), "EUR",
        "Business travel expenses", ExpenseStatus.WAITING, "Conference attendance"
    )
    db.add(ApprovalTask(
        id=next_id(APPROVAL_TASKS, db),
        expense_id=travel.id,
        owner_name=employee.display_name,
        category=travel.category,
        amount_company_ccy=travel.amount_company_ccy,
        company_currency=travel.company_currency,
        submitted_currency=travel.currency,
    ))

    lunch = _seed_expense(
        db, manager, date(2024, 3, 15), "Meals", Decimal("85"), "USD",
        "Business lunch with client", ExpenseStatus.APPROVED, "Q1 catch-up"
    )
    lunch.timeline.append(ExpenseTimelineEvent(
        at=utcnow(), decision="approved", comment="Looks good"
    ))

    db.commit()
    logger.info("Seeded demo data")
    return True


def bootstrap() -> None:
    """Create tables and counters, then seed demo data if empty."""
    init_db()
    db = SessionLocal()
    try:
        seed_if_empty(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print("Initializing database...")
    bootstrap()
    print("Database initialized successfully!")
