"""Security: access policy, bearer identity. No FastAPI."""

from app.security.identity import IdentityVerifier, extract_bearer_token
from app.security.rbac import AccessPolicy, Role, resolve_role

__all__ = [
    "AccessPolicy",
    "IdentityVerifier",
    "Role",
    "extract_bearer_token",
    "resolve_role",
]
