"""
Pydantic schemas for approval tasks, decisions and flow configuration.
"""
from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal


class ApprovalTaskResponse(BaseModel):
    """Schema for an open approval task."""
    id: int
    expense_id: int
    owner_name: str
    category: str
    amount_company_ccy: Decimal
    company_currency: str
    submitted_currency: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DecisionRequest(BaseModel):
    decision: Literal["approved", "rejected"]
    comment: Optional[str] = None


class DecisionResult(BaseModel):
    ok: bool = True
    expense_id: int
    status: str


class FlowApprover(BaseModel):
    user_id: int
    required: bool = True


class FlowConfigBase(BaseModel):
    """Approval flow policy. Range checks happen in flow_service."""
    is_manager_first: bool = True
    sequence_enabled: bool = False
    approvers: List[FlowApprover] = []
    percent_threshold: Optional[int] = None
    specific_approver_id: Optional[int] = None


class FlowConfigUpdate(FlowConfigBase):
    """Full replacement of the flow policy."""
    is_manager_first: bool
    sequence_enabled: bool
    approvers: List[FlowApprover]


class FlowConfigResponse(FlowConfigBase):
    key: str
    updated_at: datetime

    model_config = {"from_attributes": True}
