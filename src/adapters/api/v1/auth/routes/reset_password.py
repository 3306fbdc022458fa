"""Reset password endpoint, consuming a single-use reset token."""

import structlog
from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import MessageResponse, ResetPasswordRequest
from src.core.rate_limiting import client_address, rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    summary="Set a new password with a reset token",
    dependencies=[Depends(rate_limit("reset_password"))],
)
async def reset_password(request: Request, payload: ResetPasswordRequest, auth_service: AuthServiceDep):
    request_logger = logger.bind(endpoint="reset_password", client_ip=client_address(request))
    request_logger.info("password_reset_attempt", token_prefix=payload.token[:8] + "...")

    await auth_service.reset_password(payload.token, payload.new_password, payload.confirm_password)

    request_logger.info("password_reset_completed")
    return MessageResponse(
        message=get_translated_message("password_reset_successful", get_request_language(request))
    )
