"""
Approval flow policy service.
"""
from sqlalchemy.orm import Session
import logging
from app.core.exceptions import ValidationError
from app.models.approval import FlowConfig, DEFAULT_FLOW_KEY
from app.models.user import User
from app.schemas.approval import FlowConfigUpdate

logger = logging.getLogger(__name__)


def get_or_create_default(db: Session) -> FlowConfig:
    """Return the singleton flow policy, creating it with defaults if missing."""
    flow = db.query(FlowConfig).filter(FlowConfig.key == DEFAULT_FLOW_KEY).first()
    if flow:
        return flow

    flow = FlowConfig(
        key=DEFAULT_FLOW_KEY,
        is_manager_first=True,
        sequence_enabled=False,
        approvers=[],
        percent_threshold=None,
        specific_approver_id=None,
    )
    db.add(flow)
    db.commit()
    db.refresh(flow)
    logger.info("Created default approval flow")
    return flow


def validate_flow(data: FlowConfigUpdate, db: Session) -> None:
    """Range and reference checks for a new policy."""
    if data.percent_threshold is not None and not 1 <= data.percent_threshold <= 100:
        raise ValidationError("percent_threshold must be between 1 and 100")

    referenced = {a.user_id for a in data.approvers}
    if data.specific_approver_id is not None:
        referenced.add(data.specific_approver_id)
    if referenced:
        found = {u.id for u in db.query(User.id).filter(User.id.in_(referenced)).all()}
        missing = sorted(referenced - found)
        if missing:
            raise ValidationError("Unknown approver user ids", details={"user_ids": missing})

    seen = set()
    for approver in data.approvers:
        if approver.user_id in seen:
            raise ValidationError(f"Approver {approver.user_id} listed more than once")
        seen.add(approver.user_id)


def update_flow(data: FlowConfigUpdate, db: Session) -> FlowConfig:
    """
    Replace the policy in place (upsert).

    Tasks already created are not touched.
    """
    validate_flow(data, db)

    flow = db.query(FlowConfig).filter(FlowConfig.key == DEFAULT_FLOW_KEY).first()
    if not flow:
        flow = FlowConfig(key=DEFAULT_FLOW_KEY)
        db.add(flow)

    flow.is_manager_first = data.is_manager_first
    flow.sequence_enabled = data.sequence_enabled
    flow.approvers = [a.model_dump() for a in data.approvers]
    flow.percent_threshold = data.percent_threshold
    flow.specific_approver_id = data.specific_approver_id

    db.commit()
    db.refresh(flow)
    logger.info(
        f"Approval flow updated: manager_first={flow.is_manager_first}, "
        f"approvers={len(flow.approvers)}, threshold={flow.percent_threshold}, "
        f"specific_approver={flow.specific_approver_id}"
    )
    return flow
