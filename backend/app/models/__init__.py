"""Models package - Import all models for SQLAlchemy registration."""
from app.models.counter import Counter
from app.models.user import User, UserRole
from app.models.expense import Expense, ExpenseStatus, ExpenseTimelineEvent
from app.models.approval import ApprovalTask, FlowConfig

__all__ = [
    "Counter",
    "User",
    "UserRole",
    "Expense",
    "ExpenseStatus",
    "ExpenseTimelineEvent",
    "ApprovalTask",
    "FlowConfig",
]
