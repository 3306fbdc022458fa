"""Export identity domain entities for use across the application."""

from .account import Account, LoginEvent, ResetToken, normalize_email

__all__ = ["Account", "LoginEvent", "ResetToken", "normalize_email"]
