"""Wire models for the credential endpoints."""

from .misc import ApiResponse, MessageResponse
from .requests import ForgotPasswordRequest, LoginRequest, RegisterRequest, ResetPasswordRequest
from .responses.auth import AuthData
from .responses.token import TokenOut
from .responses.user import AccountOut, LoginEventOut

__all__ = [
    "AccountOut",
    "ApiResponse",
    "AuthData",
    "ForgotPasswordRequest",
    "LoginEventOut",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TokenOut",
]
