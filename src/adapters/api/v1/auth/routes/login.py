"""Login endpoint.

Authenticates an email/password pair. The client address and User-Agent are
passed through so the login event records where the sign-in came from.
"""

import structlog
from fastapi import APIRouter, Depends, Request, status

from src.adapters.api.v1.auth.schemas import ApiResponse, AuthData, LoginRequest
from src.core.logging import mask_email
from src.core.rate_limiting import client_address, rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()

_MAX_CLIENT_DESCRIPTOR = 500


@router.post(
    "",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_200_OK,
    summary="Authenticate with email and password",
    dependencies=[Depends(rate_limit("login", "login"))],
)
async def login_account(request: Request, payload: LoginRequest, auth_service: AuthServiceDep):
    client_ip = client_address(request)
    user_agent = request.headers.get("user-agent")

    request_logger = logger.bind(
        endpoint="login",
        client_ip=client_ip,
        user_agent=user_agent[:50] + "***" if user_agent and len(user_agent) > 50 else user_agent,
    )
    request_logger.info("login_attempt", email=mask_email(payload.email), remember_me=payload.remember_me)

    result = await auth_service.login(
        email=payload.email,
        password=payload.password,
        remember_me=payload.remember_me,
        ip_address=client_ip,
        client_descriptor=user_agent[:_MAX_CLIENT_DESCRIPTOR] if user_agent else None,
    )

    request_logger.info("login_completed", account_id=str(result.account.id))
    return ApiResponse[AuthData](
        message=get_translated_message("login_successful", get_request_language(request)),
        data=AuthData.from_result(result),
    )
