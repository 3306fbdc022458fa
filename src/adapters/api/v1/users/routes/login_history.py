"""Recent login history for the authenticated account."""

from typing import List

from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import ApiResponse, LoginEventOut
from src.core.dependencies.auth import CurrentAccount
from src.core.rate_limiting import rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import ProfileServiceDep
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[LoginEventOut]],
    summary="List the most recent logins, newest first",
    dependencies=[Depends(rate_limit("login_history"))],
)
async def login_history(request: Request, account: CurrentAccount, profile_service: ProfileServiceDep):
    events = await profile_service.login_history(account.id)
    return ApiResponse[List[LoginEventOut]](
        message=get_translated_message("login_history_retrieved", get_request_language(request)),
        data=[LoginEventOut.model_validate(event) for event in events],
    )
