"""
Expense service for expense-related business logic.
"""
from sqlalchemy.orm import Session, selectinload
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional
import logging
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.core.utils import utcnow
from app.models.expense import Expense, ExpenseStatus, ExpenseTimelineEvent
from app.models.user import User, UserRole
from app.schemas.user import CurrentUser
from app.services import flow_service
from app.services.approval_router import route_expense
from app.services.fx_service import CENTS, convert_to_company, get_company_currency
from app.services.sequence_service import next_id, EXPENSES

logger = logging.getLogger(__name__)

SUBMITTED = "submitted"

# Numeric(15, 2) columns hold at most 13 integer digits
MAX_AMOUNT = Decimal(10) ** 13


def _validate_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("amount must be a number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("amount must be a positive number")
    if value >= MAX_AMOUNT:
        raise ValidationError("amount is too large")
    if value != value.quantize(CENTS):
        raise ValidationError("amount must have at most 2 decimal places")
    return value


def submit_expense(
    employee_id: int,
    spend_date: date,
    category: str,
    description: str,
    amount: Decimal,
    currency: str,
    remarks: Optional[str] = None,
    db: Session = None
) -> Expense:
    """
    Record a new expense claim and route it for approval.

    The expense, its first timeline entry and any approval task are committed
    together; if routing fails nothing is persisted and the error propagates.
    """
    amount = _validate_amount(amount)
    currency = currency.strip().upper()

    employee = db.query(User).filter(User.id == employee_id).first()
    if not employee:
        raise NotFoundError("User not found")

    company_currency = get_company_currency()
    amount_company_ccy = convert_to_company(amount, currency, company_currency)
    if amount_company_ccy >= MAX_AMOUNT:
        raise ValidationError("amount is too large once converted to the company currency")

    # Loaded once and handed to the router explicitly
    flow = flow_service.get_or_create_default(db)

    try:
        expense = Expense(
            id=next_id(EXPENSES, db),
            employee_id=employee.id,
            employee_name=employee.display_name,
            spend_date=spend_date,
            category=category.strip(),
            amount=amount,
            currency=currency,
            amount_company_ccy=amount_company_ccy,
            company_currency=company_currency,
            status=ExpenseStatus.WAITING,
            description=description.strip(),
            remarks=remarks,
        )
        expense.timeline.append(ExpenseTimelineEvent(
            at=utcnow(),
            decision=SUBMITTED,
            by_user_id=employee.id,
            comment=remarks or "",
        ))
        db.add(expense)
        db.flush()

        route_expense(expense, employee, flow, db)
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Expense submission by user {employee_id} failed", exc_info=True)
        raise

    db.refresh(expense)
    logger.info(
        f"Expense {expense.id} submitted by user {employee.id}: "
        f"{amount} {currency} = {amount_company_ccy} {company_currency}"
    )
    return expense


def list_expenses(actor: CurrentUser, db: Session) -> List[Expense]:
    """Employees see their own expenses; managers and admins see everything."""
    query = db.query(Expense)
    if actor.role == UserRole.EMPLOYEE:
        query = query.filter(Expense.employee_id == actor.id)
    return query.order_by(Expense.spend_date.desc(), Expense.id.desc()).all()


def get_expense(actor: CurrentUser, expense_id: int, db: Session) -> Expense:
    """Expense detail with timeline; employees may only read their own."""
    expense = db.query(Expense).options(
        selectinload(Expense.timeline)
    ).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense not found")
    if actor.role == UserRole.EMPLOYEE and expense.employee_id != actor.id:
        raise ForbiddenError("Forbidden")
    return expense
