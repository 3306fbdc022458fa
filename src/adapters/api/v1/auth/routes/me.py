"""Current account endpoint."""

from fastapi import APIRouter, Depends, Request

from src.adapters.api.v1.auth.schemas import AccountOut, ApiResponse
from src.core.dependencies.auth import CurrentAccount
from src.core.rate_limiting import rate_limit
from src.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[AccountOut],
    summary="Return the authenticated account",
    dependencies=[Depends(rate_limit("me"))],
)
async def current_account(request: Request, account: CurrentAccount):
    return ApiResponse[AccountOut](
        message=get_translated_message("profile_retrieved", get_request_language(request)),
        data=AccountOut.from_entity(account),
    )
