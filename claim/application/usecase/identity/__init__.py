"""Identity use cases."""

from .link_account import LinkAccountUseCase
from .provision_anonymous_user import ProvisionAnonymousUserUseCase
from .resolve_current_user import ResolveCurrentUserUseCase

__all__ = [
    "LinkAccountUseCase",
    "ProvisionAnonymousUserUseCase",
    "ResolveCurrentUserUseCase",
]
