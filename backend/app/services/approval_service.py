"""
Approval queue and decision handling.
"""
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.core.utils import utcnow
from app.models.approval import ApprovalTask
from app.models.expense import Expense, ExpenseStatus, ExpenseTimelineEvent
from app.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

DECISIONS = {
    "approved": ExpenseStatus.APPROVED,
    "rejected": ExpenseStatus.REJECTED,
}


def list_queue(actor: CurrentUser, db: Session) -> List[ApprovalTask]:
    """Open tasks in creation order; empty for anyone who cannot approve."""
    if not actor.is_approver:
        return []
    return db.query(ApprovalTask).order_by(ApprovalTask.id.asc()).all()


def _claim_task(task_id: int, db: Session) -> bool:
    """Delete the task row; False when it was already gone."""
    claimed = db.query(ApprovalTask).filter(
        ApprovalTask.id == task_id
    ).delete(synchronize_session=False)
    return claimed == 1


def decide(
    actor: CurrentUser,
    task_id: int,
    decision: str,
    comment: Optional[str] = None,
    db: Session = None
) -> Expense:
    """
    Apply an approve/reject decision and retire the task.

    The task is claimed with a conditional DELETE; only the caller that
    actually removed the row goes on to update the expense, so a concurrent
    or replayed decision on the same task gets NotFoundError. Status change,
    timeline entry and task removal commit together.
    """
    if not actor.is_approver:
        raise ForbiddenError("Forbidden")

    new_status = DECISIONS.get(decision)
    if new_status is None:
        raise ValidationError("decision must be 'approved' or 'rejected'")

    task = db.query(ApprovalTask).filter(ApprovalTask.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    expense_id = task.expense_id

    try:
        expense = db.query(Expense).filter(Expense.id == expense_id).first()
        if not expense:
            logger.error(f"Approval task {task_id} references missing expense {expense_id}")
            raise NotFoundError("Expense for task not found")

        if not _claim_task(task_id, db):
            # Another decision removed it between lookup and delete
            raise NotFoundError("Task not found")

        expense.status = new_status
        expense.timeline.append(ExpenseTimelineEvent(
            at=utcnow(),
            decision=decision,
            by_user_id=actor.id,
            comment=comment or "",
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expunge(task)
    db.refresh(expense)
    logger.info(f"Task {task_id}: expense {expense_id} {decision} by user {actor.id}")
    return expense
