"""
User management routes (managers and admins).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import CurrentUser, InviteResult, ManagerUpdate, RoleUpdate, UserInvite, UserResponse
from app.api.dependencies import require_approver
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


def _invite_result(user: User, sent: bool, message: str) -> InviteResult:
    return InviteResult(
        user=UserResponse.model_validate(user),
        email_sent=sent,
        info=message if sent else None,
        warn=None if sent else message,
    )


@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    """All users ordered by id."""
    return db.query(User).order_by(User.id.asc()).all()


@router.post("", response_model=InviteResult, status_code=status.HTTP_201_CREATED)
async def invite_user(
    payload: UserInvite,
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    """Create an employee or manager and email a temporary password."""
    user, sent, message = user_service.invite_user(
        payload.name, payload.email, payload.role, payload.manager_id, db
    )
    return _invite_result(user, sent, message)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: int,
    payload: RoleUpdate,
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    return user_service.change_role(user_id, payload.role, db)


@router.patch("/{user_id}/manager", response_model=UserResponse)
async def update_manager(
    user_id: int,
    payload: ManagerUpdate,
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    return user_service.change_manager(user_id, payload.manager_id, db)


@router.post("/{user_id}/resend-invite", response_model=InviteResult)
async def resend_invite(
    user_id: int,
    current_user: CurrentUser = Depends(require_approver),
    db: Session = Depends(get_db)
):
    """Regenerate the temporary password and send the invite again."""
    user, sent, message = user_service.resend_invite(user_id, db)
    return _invite_result(user, sent, message)
