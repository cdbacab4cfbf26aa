"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class DatabaseUnavailableError(DomainError):
    """Raised when no database handle is reachable for the current request."""

    def __init__(self, message: str = "Database handle is not available"):
        super().__init__(message)


class MalformedProfileError(DomainError):
    """Raised when a provider profile lacks a field extraction requires."""

    def __init__(self, provider: str, field: str):
        self.provider = provider
        self.field = field
        super().__init__(f"{provider} profile is missing required field: {field}")


class DuplicateUserError(DomainError):
    """Raised when an insert violates a provider linkage uniqueness constraint."""

    def __init__(self, provider: str, provider_id: str):
        self.provider = provider
        self.provider_id = provider_id
        super().__init__(f"User already exists for {provider}:{provider_id}")


class UnsupportedProviderError(DomainError):
    """Raised when no strategy is registered for a provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
