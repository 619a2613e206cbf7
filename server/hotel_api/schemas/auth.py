"""Authentication-related Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.user import UserRole


class RegisterRequest(BaseModel):
    """Request schema for registering a user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: EmailStr = Field(..., description="Login email, unique per account")
    password: str = Field(..., min_length=6, max_length=128, description="Password (6+ characters)")
    phone: Optional[str] = Field(None, max_length=20, description="Contact phone number")


class LoginRequest(BaseModel):
    """Request schema for logging in."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Password")


class AuthData(BaseModel):
    """Account details plus a bearer token."""

    user_id: int
    name: str
    email: str
    role: UserRole
    token: str = Field(..., description="Bearer token for the Authorization header")


class TokenUser(BaseModel):
    """Identity carried by a validated bearer token."""

    user_id: int
    email: Optional[str] = None
    role: str = "USER"

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"
