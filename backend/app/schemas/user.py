"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from app.models.user import UserRole


class CurrentUser(BaseModel):
    """Identity of the acting user, passed explicitly into services."""
    id: int
    name: str
    email: str
    role: UserRole
    manager_id: Optional[int] = None

    model_config = {"from_attributes": True}

    @property
    def is_approver(self) -> bool:
        return self.role in (UserRole.MANAGER, UserRole.ADMIN)


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    name: str
    email: str
    role: UserRole
    manager_id: Optional[int] = None
    reset_required: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SignupRequest(BaseModel):
    """Schema for the initial (admin) signup."""
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)


class UserInvite(BaseModel):
    """Schema for an admin/manager creating an account."""
    name: str = Field(min_length=1)
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    manager_id: Optional[int] = None


class RoleUpdate(BaseModel):
    role: UserRole


class ManagerUpdate(BaseModel):
    manager_id: Optional[int] = None


class InviteResult(BaseModel):
    """User plus the outcome of the invite email."""
    user: UserResponse
    email_sent: bool
    info: Optional[str] = None
    warn: Optional[str] = None


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(min_length=1)


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ForgotPassword(BaseModel):
    email: EmailStr


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    reset_required: bool = False
