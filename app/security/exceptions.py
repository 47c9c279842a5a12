"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(SecurityError):
    """Raised when the bearer credential is missing, malformed, expired or not signed by us."""


class ForbiddenError(SecurityError):
    """Raised when an authenticated role has no access to the audit surfaces."""


class ProfileNotFoundError(SecurityError):
    """Raised when an authenticated user has no resolvable profile/role binding."""
