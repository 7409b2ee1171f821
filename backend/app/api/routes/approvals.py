"""
Approval queue and decision routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.schemas.approval import ApprovalTaskResponse, DecisionRequest, DecisionResult
from app.schemas.user import CurrentUser
from app.api.dependencies import get_current_user
from app.services import approval_service

router = APIRouter(prefix="/approvals", tags=["approvals"])


@router.get("/queue", response_model=List[ApprovalTaskResponse])
async def get_queue(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Open approval tasks; employees always get an empty list."""
    return approval_service.list_queue(current_user, db)


@router.post("/{task_id}/decide", response_model=DecisionResult)
async def decide(
    task_id: int,
    payload: DecisionRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Approve or reject the expense behind a task and close the task."""
    expense = approval_service.decide(current_user, task_id, payload.decision, payload.comment, db)
    return DecisionResult(expense_id=expense.id, status=expense.status.value)
