"""Credential endpoints: sign-up, sign-in, session, password reset and OAuth."""

from fastapi import APIRouter

from .routes import forgot_password, login, logout, me, oauth, register, reset_password

router = APIRouter(prefix="/auth", tags=["auth"])

_MOUNTS = (
    ("/register", register),
    ("/login", login),
    ("/me", me),
    ("/logout", logout),
    ("/forgot-password", forgot_password),
    ("/reset-password", reset_password),
    ("/oauth", oauth),
)

for path, module in _MOUNTS:
    router.include_router(module.router, prefix=path)

__all__ = ["router"]
