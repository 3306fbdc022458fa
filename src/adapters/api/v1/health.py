"""Liveness and database health endpoint."""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.dependency_injection.auth_dependencies import get_services
from src.utils.clock import utc_now
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_database_health(request: Request) -> Dict[str, Any]:
    """Runs ``SELECT 1`` through the repository's session factory."""
    repository = get_services(request).repository
    try:
        async with repository.session_factory() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "healthy"}
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"status": "unhealthy", "error": type(e).__name__}


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """Reports 200 when the database answers, 503 otherwise."""
    db_health = await check_database_health(request)
    healthy = db_health["status"] == "healthy"

    body = HealthResponse(
        status="ok" if healthy else "degraded",
        env=settings.APP_ENV,
        message=get_translated_message(
            "health_status_ok" if healthy else "repository_unavailable", get_request_language(request)
        ),
        services={"database": db_health},
        timestamp=utc_now(),
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump(mode="json"))
