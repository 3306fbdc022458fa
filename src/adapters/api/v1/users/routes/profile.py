"""Profile read and update endpoints for the authenticated account."""

from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import AccountOut, ApiResponse
from src.adapters.api.v1.users.schemas import UpdateProfileRequest
from src.core.dependencies.auth import CurrentAccount
from src.core.rate_limiting import rate_limit
from src.infrastructure.dependency_injection.auth_dependencies import ProfileServiceDep
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[AccountOut],
    summary="Return the account profile",
    dependencies=[Depends(rate_limit("profile"))],
)
async def get_profile(request: Request, account: CurrentAccount, profile_service: ProfileServiceDep):
    profile = await profile_service.get_profile(account.id)
    return ApiResponse[AccountOut](
        message=get_translated_message("profile_retrieved", get_request_language(request)),
        data=AccountOut.from_entity(profile),
    )


@router.patch(
    "",
    response_model=ApiResponse[AccountOut],
    summary="Update profile fields",
    dependencies=[Depends(rate_limit("profile"))],
)
async def update_profile(
    request: Request,
    payload: UpdateProfileRequest,
    account: CurrentAccount,
    profile_service: ProfileServiceDep,
):
    profile = await profile_service.update_profile(
        account.id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        date_of_birth=payload.date_of_birth,
    )
    return ApiResponse[AccountOut](
        message=get_translated_message("profile_updated", get_request_language(request)),
        data=AccountOut.from_entity(profile),
    )
