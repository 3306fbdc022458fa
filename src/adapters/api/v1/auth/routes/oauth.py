"""OAuth sign-in endpoints.

``GET /oauth/{provider}`` redirects the browser to the provider with a random
``state`` that is also kept in a short-lived HttpOnly cookie. The callback
checks the two match, exchanges the code for a verified identity and signs the
resolved account in.
"""

import secrets

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from src.adapters.api.v1.auth.schemas import ApiResponse, AuthData
from src.core.config.settings import settings
from src.core.exceptions import AuthenticationError
from src.core.rate_limiting import client_address, rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language, get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()

STATE_COOKIE = "oauth_state"
STATE_COOKIE_MAX_AGE = 600


@router.get(
    "/{provider}",
    response_class=RedirectResponse,
    status_code=302,
    summary="Start an OAuth sign-in",
    dependencies=[Depends(rate_limit("oauth_start"))],
)
async def oauth_start(provider: str, auth_service: AuthServiceDep):
    oauth_provider = auth_service.get_oauth_provider(provider)
    state = secrets.token_urlsafe(32)

    response = RedirectResponse(oauth_provider.authorization_url(state), status_code=302)
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    logger.info("oauth_redirect", provider=oauth_provider.name)
    return response


@router.get(
    "/{provider}/callback",
    response_model=ApiResponse[AuthData],
    summary="Complete an OAuth sign-in",
    dependencies=[Depends(rate_limit("oauth_callback", "login"))],
)
async def oauth_callback(
    request: Request,
    provider: str,
    auth_service: AuthServiceDep,
    code: str = Query(..., min_length=1),
    state: str = Query(..., min_length=1),
):
    client_ip = client_address(request)
    request_logger = logger.bind(endpoint="oauth_callback", provider=provider, client_ip=client_ip)

    expected_state = request.cookies.get(STATE_COOKIE)
    if not expected_state or not secrets.compare_digest(expected_state, state):
        request_logger.warning("oauth_state_mismatch")
        raise AuthenticationError(code="oauth_state_mismatch")

    assertion = await auth_service.exchange_oauth_code(provider, code)
    result = await auth_service.oauth_callback(
        assertion,
        ip_address=client_ip,
        client_descriptor=request.headers.get("user-agent"),
    )

    request_logger.info("oauth_callback_completed", account_id=str(result.account.id))
    return ApiResponse[AuthData](
        message=get_translated_message("login_successful", get_request_language(request)),
        data=AuthData.from_result(result),
    )
