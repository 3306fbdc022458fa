"""Avatar reference endpoints."""

from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import AccountOut, ApiResponse
from src.adapters.api.v1.users.schemas import AvatarRequest
from src.core.dependencies.auth import CurrentAccount
from src.core.rate_limiting import rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import ProfileServiceDep
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter(dependencies=[Depends(rate_limit("avatar"))])


@router.put("", response_model=ApiResponse[AccountOut], summary="Set the avatar reference")
async def set_avatar(
    request: Request,
    payload: AvatarRequest,
    account: CurrentAccount,
    profile_service: ProfileServiceDep,
):
    profile = await profile_service.set_avatar(account.id, payload.avatar_url)
    return ApiResponse[AccountOut](
        message=get_translated_message("avatar_updated", get_request_language(request)),
        data=AccountOut.from_entity(profile),
    )


@router.delete("", response_model=ApiResponse[AccountOut], summary="Remove the avatar reference")
async def remove_avatar(request: Request, account: CurrentAccount, profile_service: ProfileServiceDep):
    profile = await profile_service.remove_avatar(account.id)
    return ApiResponse[AccountOut](
        message=get_translated_message("avatar_removed", get_request_language(request)),
        data=AccountOut.from_entity(profile),
    )
