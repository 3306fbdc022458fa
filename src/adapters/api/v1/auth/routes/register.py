"""Registration endpoint.

Creates a password account, sends the welcome email and signs the new account
in. All rules live in `AuthService.register`; the route only translates the
request and the result.
"""

import structlog
from fastapi import APIRouter, Depends, Request, status

from src.adapters.api.v1.auth.schemas import ApiResponse, AuthData, RegisterRequest
from src.core.logging import mask_email
from src.core.rate_limiting import client_address, rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    dependencies=[Depends(rate_limit("register", "register"))],
)
async def register_account(request: Request, payload: RegisterRequest, auth_service: AuthServiceDep):
    language = get_request_language(request)
    request_logger = logger.bind(endpoint="register", client_ip=client_address(request))
    request_logger.info("registration_attempt", email=mask_email(payload.email))

    result = await auth_service.register(
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        date_of_birth=payload.date_of_birth,
        language=language,
    )

    request_logger.info("registration_completed", account_id=str(result.account.id))
    return ApiResponse[AuthData](
        message=get_translated_message("registration_successful", language),
        data=AuthData.from_result(result),
    )
