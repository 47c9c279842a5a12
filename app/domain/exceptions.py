"""Domain-specific exceptions. Pure domain layer. No infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when domain validation rules are violated (malformed payload or filter)."""


class InvalidActionError(DomainValidationError):
    """Raised when an audit action is not one of the enumerated verbs."""


class InvalidDateRangeError(DomainValidationError):
    """Raised when a query date range is inverted (date_from after date_to)."""


class InvalidMetadataError(DomainValidationError):
    """Raised when a payload document is not JSON-serializable."""
