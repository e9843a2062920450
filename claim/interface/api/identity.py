"""Response shapes and cookie updates shared by the identity routes."""

from fastapi import Response
from pydantic import BaseModel

from claim.application.usecase.identity.common import UserInfo
from claim.application.usecase.identity.link_account import LinkAccountResponse
from claim.config import Settings
from claim.interface.api.cookies import set_anonymous_cookie, set_session_cookie


class CurrentUserResponse(BaseModel):
    """Who the visitor is.

    ``degraded`` is set when the store could not answer; the visitor should
    be treated as still anonymous and the call retried later.
    """

    user: UserInfo | None = None
    verified: bool = False
    degraded: bool = False


def apply_link(response: Response, linked: LinkAccountResponse, settings: Settings) -> None:
    """Write the tokens produced by a linking run back to the client."""
    if linked.session_token:
        set_session_cookie(response, linked.session_token, settings)
    if linked.issued_token:
        set_anonymous_cookie(response, linked.issued_token, settings)
