"""
Approval task and approval flow configuration models.
"""
from sqlalchemy import Column, String, Numeric, Boolean, Integer, JSON, ForeignKey
from app.db.base import Base, BaseModel, TimestampMixin

DEFAULT_FLOW_KEY = "default"


class ApprovalTask(BaseModel):
    """Open work item: "this expense needs a decision". Deleted when decided."""
    __tablename__ = "approval_tasks"

    # Unique: at most one open task per expense
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, unique=True, index=True)
    owner_name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)
    amount_company_ccy = Column(Numeric(15, 2), nullable=False)
    company_currency = Column(String(3), nullable=False)
    submitted_currency = Column(String(3), nullable=False)


class FlowConfig(TimestampMixin, Base):
    """Organization-wide approval routing policy (one row, keyed "default")."""
    __tablename__ = "flow_configs"

    key = Column(String(50), primary_key=True, default=DEFAULT_FLOW_KEY)
    is_manager_first = Column(Boolean, nullable=False, default=True)
    sequence_enabled = Column(Boolean, nullable=False, default=False)
    approvers = Column(JSON, nullable=False, default=list)  # [{"user_id": int, "required": bool}, ...]
    percent_threshold = Column(Integer, nullable=True)  # 1..100
    specific_approver_id = Column(Integer, nullable=True)
