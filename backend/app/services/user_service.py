"""
User service for signup, invites and reporting-line changes.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging
from app.core.config import settings
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError, NotificationError, ValidationError
from app.core.security import generate_temp_password, get_password_hash, verify_password
from app.models.user import User, UserRole
from app.services import notification_service
from app.services.sequence_service import next_id, USERS

logger = logging.getLogger(__name__)

INVITE_SENT = "Invite email sent."
INVITE_FAILED = 'User created, but failed to send invite email. Please use "Resend invite".'


def get_by_email(email: str, db: Session) -> Optional[User]:
    """Case-insensitive lookup; emails are stored lower-case."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user(user_id: int, db: Session) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def authenticate(email: str, password: str, db: Session) -> Optional[User]:
    user = get_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def _create_user(
    name: str,
    email: str,
    role: UserRole,
    password: str,
    manager_id: Optional[int],
    reset_required: bool,
    db: Session
) -> User:
    if get_by_email(email, db):
        raise ConflictError("Email already in use")

    user = User(
        id=next_id(USERS, db),
        name=name.strip(),
        email=email.strip().lower(),
        role=role,
        manager_id=manager_id,
        hashed_password=get_password_hash(password),
        reset_required=reset_required,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request registered the same email after the check above
        db.rollback()
        logger.warning(f"Duplicate email on user insert: {email}")
        raise ConflictError("Email already in use")
    db.refresh(user)
    return user


def signup_first_admin(name: str, email: str, password: str, db: Session) -> User:
    """Bootstrap signup: only allowed while there are no users at all."""
    if db.query(User).count() > 0:
        raise ForbiddenError("Signup is disabled after initial setup")

    user = _create_user(name, email, UserRole.ADMIN, password, None, False, db)
    logger.info(f"Initial admin {user.id} created")
    return user


def _send_invite(email: str, temp_password: str) -> Tuple[bool, str]:
    try:
        notification_service.send_invite(email, temp_password)
    except NotificationError:
        return False, INVITE_FAILED
    return True, INVITE_SENT


def invite_user(
    name: str,
    email: str,
    role: UserRole,
    manager_id: Optional[int],
    db: Session
) -> Tuple[User, bool, str]:
    """
    Create an employee/manager account with a temporary password and email it.

    Returns (user, email_sent, message). A failed email keeps the account.
    """
    if role == UserRole.ADMIN:
        raise ValidationError("Invited users must be employees or managers")
    if manager_id is not None:
        get_user(manager_id, db)

    temp_password = generate_temp_password(settings.TEMP_PASSWORD_LENGTH)
    user = _create_user(name, email, role, temp_password, manager_id, True, db)
    logger.info(f"User {user.id} ({role.value}) invited")

    sent, message = _send_invite(user.email, temp_password)
    return user, sent, message


def resend_invite(user_id: int, db: Session) -> Tuple[User, bool, str]:
    """Issue a fresh temporary password and email it again."""
    user = get_user(user_id, db)
    temp_password = generate_temp_password(settings.TEMP_PASSWORD_LENGTH)
    user.hashed_password = get_password_hash(temp_password)
    user.reset_required = True
    db.commit()
    db.refresh(user)

    sent, message = _send_invite(user.email, temp_password)
    return user, sent, "Invite re-sent." if sent else message


def change_role(user_id: int, role: UserRole, db: Session) -> User:
    if role == UserRole.ADMIN:
        raise ValidationError("Role must be employee or manager")
    user = get_user(user_id, db)
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} role set to {role.value}")
    return user


def change_manager(user_id: int, manager_id: Optional[int], db: Session) -> User:
    user = get_user(user_id, db)
    if manager_id is not None:
        if manager_id == user_id:
            raise ValidationError("A user cannot be their own manager")
        get_user(manager_id, db)
    user.manager_id = manager_id
    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} manager set to {manager_id}")
    return user


def change_password(user_id: int, current_password: str, new_password: str, db: Session) -> None:
    user = get_user(user_id, db)
    if not verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    user.hashed_password = get_password_hash(new_password)
    user.reset_required = False
    db.commit()
