"""Governance-layer exceptions. Typed, no HTTP."""


class GovernanceError(Exception):
    """Base for all governance-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PersistenceError(GovernanceError):
    """Raised when the durable store rejects an audit write or query."""


class AuditRecordNotFoundError(GovernanceError):
    """Raised when a record does not exist or lies outside the caller's scope."""
