"""
Approval flow policy routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.approval import FlowConfigResponse, FlowConfigUpdate
from app.schemas.user import CurrentUser
from app.api.dependencies import require_approver
from app.services import flow_service

router = APIRouter(prefix="/flows", tags=["flows"])


@router.get("", response_model=FlowConfigResponse)
async def get_flow(
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    """Current policy; created with defaults on first read."""
    return flow_service.get_or_create_default(db)


@router.put("", response_model=FlowConfigResponse)
async def put_flow(
    payload: FlowConfigUpdate,
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    """Replace the policy."""
    return flow_service.update_flow(payload, db)
