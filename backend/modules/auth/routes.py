"""
Account linking endpoint.

POST /api/auth/link-account dispatches on ``action``:
- check: report whether an OAuth sign-in collides with an existing account
- link: merge the signed-in OAuth user into that account
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends

from api.dependencies import get_account_linker
from api.middleware.auth import get_optional_user
from shared.exceptions import ExternalServiceError, ValidationError
from shared.models import AuthenticatedUser

from .exceptions import (
    AccountLinkFailedError,
    AccountLinkingDisabledError,
    InvalidLinkingTokenError,
    LinkingNotRequiredError,
    MissingTokenError,
    UserMismatchError,
)
from .interfaces import IAccountLinker
from .models import LinkAccountRequest, LinkAccountResponse, LinkCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/auth/link-account",
    response_model=Union[LinkCheckResponse, LinkAccountResponse],
)
async def link_account(
    request: LinkAccountRequest,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    linker: IAccountLinker = Depends(get_account_linker),
) -> Union[LinkCheckResponse, LinkAccountResponse]:
    if not linker.is_account_linking_enabled():
        raise AccountLinkingDisabledError()

    if request.action == "check":
        return await _check(request, linker)
    if request.action == "link":
        return await _link(request, user, linker)
    raise ValidationError("Invalid action")


async def _check(request: LinkAccountRequest, linker: IAccountLinker) -> LinkCheckResponse:
    if not request.email or not request.provider:
        raise ValidationError("Email and provider are required")

    result = await linker.check_account_linking(request.email, request.provider)
    return LinkCheckResponse(result=result)


async def _link(
    request: LinkAccountRequest,
    user: Optional[AuthenticatedUser],
    linker: IAccountLinker,
) -> LinkAccountResponse:
    if not request.token or not request.oauth_user_id or not request.provider:
        raise ValidationError("Token, OAuth user ID, and provider are required")

    token_data = linker.verify_linking_token(request.token)
    if token_data is None:
        raise InvalidLinkingTokenError()

    if user is None:
        raise MissingTokenError()
    if user.id != request.oauth_user_id:
        raise UserMismatchError()
    # The token binds one provider to one email address
    if request.provider != token_data.provider:
        raise UserMismatchError("Provider does not match the linking token")
    if (user.email or "").lower() != token_data.email.lower():
        raise UserMismatchError("Email does not match the linking token")

    # Re-check: the collision must still exist at link time
    check = await linker.check_account_linking(token_data.email, token_data.provider)
    if not check.needs_linking or not check.existing_user_id:
        raise LinkingNotRequiredError()

    try:
        result = await linker.link_oauth_to_existing_account(
            check.existing_user_id, user.id, token_data.provider
        )
    except Exception:
        logger.exception(f"Error linking {token_data.provider} account for user {user.id}")
        raise ExternalServiceError("Internal server error", service="supabase")

    if not result.success or not result.linked_user_id:
        raise AccountLinkFailedError(result.error or "Failed to link accounts")

    return LinkAccountResponse(linked_user_id=result.linked_user_id)
