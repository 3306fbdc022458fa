from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.domain.services.auth.password_policy import password_policy

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    email: EmailStr = Field(..., examples=["alice@example.com"])
    password: str = Field(..., examples=["Str0ngPassw0rd"])
    first_name: str = Field(..., min_length=1, max_length=100, examples=["Alice"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Liddell"])
    date_of_birth: Optional[date] = Field(default=None, examples=["1990-05-04"])

    @field_validator("password")
    @classmethod
    def password_meets_policy(cls, value: str) -> str:
        return password_policy.validate(value)


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    email: EmailStr = Field(..., examples=["alice@example.com"])
    password: str = Field(..., min_length=1, examples=["Str0ngPassw0rd"])
    remember_me: bool = Field(default=False, description="Issue a 30 day token instead of 7 days")


class ForgotPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/forgot-password``."""

    email: EmailStr = Field(
        ...,
        examples=["alice@example.com"],
        description="Email address to send password reset instructions to",
    )


class ResetPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password``."""

    token: str = Field(
        ...,
        examples=["a1b2c3d4e5f6..."],
        description="Password reset token received via email",
        min_length=64,
        max_length=64,
    )
    new_password: str = Field(
        ...,
        examples=["NewSecurePass123"],
        description="New password that meets security policy requirements",
    )
    confirm_password: str = Field(..., examples=["NewSecurePass123"])

    @field_validator("new_password")
    @classmethod
    def password_meets_policy(cls, value: str) -> str:
        return password_policy.validate(value)
