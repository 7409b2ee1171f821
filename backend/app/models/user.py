"""
User model for authentication and approval routing.
"""
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


APPROVER_ROLES = (UserRole.MANAGER, UserRole.ADMIN)


class User(BaseModel):
    """User model. Email is stored lower-case so lookups are case-insensitive."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e], name="user_role"),
        nullable=False,
        default=UserRole.EMPLOYEE,
    )
    # Reporting line, not ownership
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    reset_required = Column(Boolean, default=False, nullable=False)

    # Relationships
    manager = relationship("User", remote_side="User.id", foreign_keys=[manager_id])
    expenses = relationship("Expense", back_populates="employee")

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def is_approver(self) -> bool:
        return self.role in APPROVER_ROLES
