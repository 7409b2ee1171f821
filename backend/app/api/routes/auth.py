"""
Authentication routes for signup, login and password management.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.user import (
    CurrentUser, ForgotPassword, PasswordChange, SignupRequest, Token, UserLogin, UserResponse
)
from app.core.security import create_access_token
from app.api.dependencies import get_current_user
from app.services import user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Create the first account, which becomes the admin."""
    return user_service.signup_first_admin(payload.name, payload.email, payload.password, db)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = user_service.authenticate(credentials.email, credentials.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return Token(
        access_token=access_token,
        user=UserResponse.model_validate(user),
        reset_required=bool(user.reset_required),
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Refresh the session's user."""
    return user_service.get_user(current_user.id, db)


@router.post("/change-password")
async def change_password(
    payload: PasswordChange,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change own password and clear the first-login flag."""
    user_service.change_password(current_user.id, payload.current_password, payload.new_password, db)
    return {"ok": True}


@router.post("/forgot")
async def forgot_password(payload: ForgotPassword):
    """Always succeeds so account existence is not leaked."""
    return {"ok": True, "message": "If the email exists, a temporary password has been sent."}
