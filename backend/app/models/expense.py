"""
Expense model and its append-only timeline.
"""
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import Base, BaseModel
from app.core.utils import utcnow
import enum


class ExpenseStatus(str, enum.Enum):
    """Expense status enumeration."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    WAITING = "waiting"
    APPROVED = "approved"
    REJECTED = "rejected"


class Expense(BaseModel):
    """A single spend claim submitted by an employee."""
    __tablename__ = "expenses"

    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Snapshot at submission time; does not follow later renames
    employee_name = Column(String(255), nullable=False)
    spend_date = Column(Date, nullable=False, index=True)
    category = Column(String(50), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    amount_company_ccy = Column(Numeric(15, 2), nullable=False)
    company_currency = Column(String(3), nullable=False)
    status = Column(
        SQLEnum(ExpenseStatus, values_callable=lambda e: [m.value for m in e], name="expense_status"),
        nullable=False,
        default=ExpenseStatus.WAITING,
    )
    description = Column(Text, nullable=False)
    remarks = Column(Text, nullable=True)

    # Relationships
    employee = relationship("User", back_populates="expenses")
    timeline = relationship(
        "ExpenseTimelineEvent",
        back_populates="expense",
        order_by="ExpenseTimelineEvent.id",
        cascade="all, delete-orphan",
    )


class ExpenseTimelineEvent(Base):
    """One lifecycle event of an expense. Rows are only ever inserted."""
    __tablename__ = "expense_timeline_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    at = Column(DateTime, nullable=False, default=utcnow)
    decision = Column(String(20), nullable=False)
    by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    comment = Column(Text, nullable=False, default="")

    # Relationships
    expense = relationship("Expense", back_populates="timeline")
