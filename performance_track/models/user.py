"""User model definitions."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User roles."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"

    @property
    def is_elevated(self) -> bool:
        """Managers and admins may act on goals they do not own."""
        return self in (UserRole.MANAGER, UserRole.ADMIN)


class UserBase(BaseModel):
    """Base user fields."""

    email: EmailStr
    name: str
    role: UserRole = UserRole.EMPLOYEE


class UserRegister(BaseModel):
    """Self-service sign-up; always yields an EMPLOYEE."""

    email: EmailStr
    name: str
    password: str


class UserCreate(UserBase):
    """User creation model with password."""

    password: str


class User(UserBase):
    """User model without password (for API responses)."""

    id: str = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class UserInDB(User):
    """User model with hashed password (for database storage)."""

    hashed_password: str


class UserRef(BaseModel):
    """Reference to a user embedded in another document."""

    id: str
    name: str


class CurrentUser(BaseModel):
    """Identity of the authenticated caller."""

    id: str
    role: UserRole
