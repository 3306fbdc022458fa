"""Version 1 of the portcullis HTTP API, mounted under ``API_V1_PREFIX``."""

from fastapi import APIRouter

from . import health
from .auth import router as auth_router
from .users import router as users_router

api_router = APIRouter()

for child in (health.router, auth_router, users_router):
    api_router.include_router(child)
