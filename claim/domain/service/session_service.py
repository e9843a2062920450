"""Session token domain service."""

import logfire

from claim.config import AuthSettings
from claim.domain.value import SessionClaims
from claim.util.jwt import JWTError, create_token, verify_token

from .base import Service


class SessionService(Service):
    """Issue and read signed session tokens carrying verified claims."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize session service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue(self, claims: SessionClaims) -> str:
        """Create a signed session token.

        Args:
            claims: Verified session claims

        Returns:
            JWT token string
        """
        with logfire.span(
            "session_service.issue",
            external_id=claims.external_id,
            linked=claims.linked,
        ):
            token = create_token(claims, self.auth_settings)
            logfire.info(
                "Session token issued",
                external_id=claims.external_id,
                linked=claims.linked,
            )
            return token

    def read(self, token: str | None) -> SessionClaims | None:
        """Read claims from a session token without raising.

        Args:
            token: JWT token string (optional)

        Returns:
            Claims if the token is present and valid, None otherwise
        """
        if not token:
            return None

        try:
            return verify_token(token, self.auth_settings)
        except JWTError as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "Session token rejected, treating as unauthenticated", error=str(e)
            )
            return None
