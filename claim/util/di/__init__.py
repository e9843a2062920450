"""Dependency injection module."""

from typing import Type

from claim.util.di.application import ProdApplicationProvider
from claim.util.di.base import Component, ProviderBase
from claim.util.di.core import ProdConfigProvider
from claim.util.di.domain import ProdDomainProvider
from claim.util.di.infrastructure import PersistenceProvider, ProdPersistenceProvider

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,  # mockable: "persistence"
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for an entry of ``PROVIDERS``.

    Concrete providers are returned as is. A mockable component base returns
    its production or mock subclass.

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    if base.__mock_component__ is None:
        return base

    for impl in base.__subclasses__():
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
