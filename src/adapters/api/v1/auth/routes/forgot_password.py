"""Forgot password endpoint.

Always answers with the same acknowledgement, whether or not the email
belongs to an account, so the endpoint cannot be used to probe for accounts.
"""

import structlog
from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import ForgotPasswordRequest, MessageResponse
from src.core.rate_limiting import client_address, rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    summary="Request a password reset email",
    dependencies=[Depends(rate_limit("forgot_password", "forgot_password"))],
)
async def forgot_password(request: Request, payload: ForgotPasswordRequest, auth_service: AuthServiceDep):
    logger.bind(endpoint="forgot_password", client_ip=client_address(request)).info("password_reset_requested")
    message = await auth_service.forgot_password(payload.email, language=get_request_language(request))
    return MessageResponse(message=message)
