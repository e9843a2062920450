"""Domain services."""

from .account_linking_service import AccountLinkingService
from .base import Service
from .display_name import DisplayNameGenerator
from .identity_resolver import IdentityResolver
from .provisioning_service import ProvisioningService
from .public_id import PublicIdGenerator
from .session_service import SessionService
from .user_service import UserService

__all__ = [
    "AccountLinkingService",
    "DisplayNameGenerator",
    "IdentityResolver",
    "ProvisioningService",
    "PublicIdGenerator",
    "Service",
    "SessionService",
    "UserService",
]
