"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a resource fetched by key does not exist.

    Lookups that may legitimately find nothing return None instead.
    """

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateIdentifierError(DomainError):
    """Raised by a repository when a write would break a unique constraint."""

    field: str = "identifier"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Duplicate {self.field}: {value}")


class DuplicatePublicIdError(DuplicateIdentifierError):
    """Another record already owns this public ID."""

    field = "public_id"


class DuplicateExternalIdError(DuplicateIdentifierError):
    """Another record is already linked to this external ID."""

    field = "external_id"


class ProvisioningExhaustedError(DomainError):
    """Every generated public ID collided; retry the whole request later."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not provision anonymous user after {attempts} attempts"
        )


class LinkingConflictError(DomainError):
    """Linking lost a race and the winner could not be found on re-check.

    Callers should treat the user as still anonymous and try again later.
    """

    def __init__(self, external_id: str):
        self.external_id = external_id
        super().__init__(f"Unresolved linking conflict for external ID {external_id}")
