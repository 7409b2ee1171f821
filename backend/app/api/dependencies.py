"""
Shared route dependencies: authentication and role checks.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional
from app.core.security import user_id_from_token
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import CurrentUser

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_record(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to a User row or fail with 401."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise unauthorized

    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise unauthorized

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise unauthorized
    return user


def get_current_user(user: User = Depends(get_current_user_record)) -> CurrentUser:
    """The acting user as an explicit record handed to services."""
    return CurrentUser.model_validate(user)


def require_approver(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Allow managers and admins only."""
    if not current_user.is_approver:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )
    return current_user
