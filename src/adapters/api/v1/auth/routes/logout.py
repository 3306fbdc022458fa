"""Logout endpoint.

Sessions are stateless signed tokens, so logout only acknowledges; the client
discards its token.
"""

from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import MessageResponse
from src.core.dependencies.auth import CurrentSession
from src.core.rate_limiting import rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    summary="Sign out",
    dependencies=[Depends(rate_limit("logout"))],
)
async def logout_account(request: Request, session: CurrentSession, auth_service: AuthServiceDep):
    await auth_service.logout(session)
    return MessageResponse(message=get_translated_message("logout_successful", get_request_language(request)))
