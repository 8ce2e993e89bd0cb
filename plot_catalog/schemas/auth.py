"""
Pydantic schemas for sign-up, sign-in and the current user.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class RegisterRequest(BaseModel):
    """Sign-up request."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: Optional[str] = Field(None, max_length=255)


class LoginRequest(BaseModel):
    """Sign-in request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public view of an account."""

    id: str
    email: str
    full_name: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None


class CurrentUserResponse(UserResponse):
    """Account of the caller, with their admin flag."""

    is_admin: bool = False


class LoginResponse(BaseModel):
    """Bearer token issued on sign-in."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: CurrentUserResponse
