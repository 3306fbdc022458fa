"""Endpoints for the signed-in account's own profile data."""

from fastapi import APIRouter

from .routes import avatar, login_history, profile

router = APIRouter(prefix="/users", tags=["users"])

router.include_router(profile.router, prefix="/me")
router.include_router(avatar.router, prefix="/me/avatar")
router.include_router(login_history.router, prefix="/me/login-history")

__all__ = ["router"]
