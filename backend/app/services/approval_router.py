"""
Approval task routing.

Decides, for a freshly submitted expense, whether somebody has to approve it
and if so records a single ApprovalTask. The flow policy and the employee are
passed in by the caller so routing never reads ambient state.

Conditions (any one is enough):
    * manager-first policy and the employee has an existing manager
    * both percent_threshold and specific_approver_id are set and the
      designated approver exists (the designated approver always reviews)

A misconfigured employee or approver is logged and simply produces no task;
the expense then stays ``waiting``.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session
from app.models.approval import ApprovalTask, FlowConfig
from app.models.expense import Expense
from app.models.user import User
from app.services.sequence_service import next_id, APPROVAL_TASKS

logger = logging.getLogger(__name__)


def _manager_condition(employee: User, db: Session) -> bool:
    if employee.manager_id is None:
        logger.error(
            f"Manager-first flow but employee {employee.id} has no manager; "
            f"no approver for their expenses"
        )
        return False

    manager = db.query(User).filter(User.id == employee.manager_id).first()
    if not manager:
        logger.error(
            f"Employee {employee.id} references missing manager {employee.manager_id}"
        )
        return False
    return True


def _specific_approver_condition(flow: FlowConfig, db: Session) -> bool:
    if flow.percent_threshold is None or flow.specific_approver_id is None:
        return False

    approver = db.query(User).filter(User.id == flow.specific_approver_id).first()
    if not approver:
        logger.error(f"Flow references missing specific approver {flow.specific_approver_id}")
        return False
    return True


def needs_approval(employee: User, flow: FlowConfig, db: Session) -> bool:
    """True when the policy requires a decision on this employee's expenses."""
    needed = False
    if flow.is_manager_first and _manager_condition(employee, db):
        needed = True
    if _specific_approver_condition(flow, db):
        needed = True
    return needed


def route_expense(
    expense: Expense,
    employee: User,
    flow: FlowConfig,
    db: Session
) -> Optional[ApprovalTask]:
    """
    Create the approval task for ``expense`` if the policy requires one.

    Flushes but does not commit; runs inside the submission transaction.
    Returns the existing task if the expense already has one.
    """
    if not needs_approval(employee, flow, db):
        logger.info(f"Expense {expense.id}: no approval condition met, left waiting")
        return None

    existing = db.query(ApprovalTask).filter(ApprovalTask.expense_id == expense.id).first()
    if existing:
        return existing

    task = ApprovalTask(
        id=next_id(APPROVAL_TASKS, db),
        expense_id=expense.id,
        owner_name=employee.display_name,
        category=expense.category,
        amount_company_ccy=expense.amount_company_ccy,
        company_currency=expense.company_currency,
        submitted_currency=expense.currency,
    )
    db.add(task)
    db.flush()
    logger.info(f"Created approval task {task.id} for expense {expense.id}")
    return task
