"""Pydantic schemas for authentication endpoints."""

from datetime import date, datetime
from pydantic import EmailStr, Field
from uuid import UUID
from app.models.user import UserRole
from app.schemas.common import CamelModel


class UserRegister(CamelModel):
    """Request schema for patient registration."""
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None


class UserLogin(CamelModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class UserOut(CamelModel):
    """Response schema for user info."""
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: UserRole
    is_active: bool
    is_verified: bool
    date_of_birth: date | None = None
    gender: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    created_at: datetime | None = None


class Token(CamelModel):
    """Response schema for login and register; carries the JWT."""
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class ProfileUpdate(CamelModel):
    """Fields a patient may change on their own profile."""
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None


class ChangePassword(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)


class ForgotPassword(CamelModel):
    """Request schema for forgot password."""
    email: EmailStr


class ResetPassword(CamelModel):
    """Request schema for password reset."""
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
