"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold logic that spans the repository and the value
    objects: resolving, provisioning and linking identities.
    """

    pass
