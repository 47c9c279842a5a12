"""Domain models. Pure business entities."""

from app.domain.models.audit import (
    AUTH_ACTIONS,
    SENSITIVE_ACTIONS,
    Actor,
    AuditAction,
    AuditFilters,
    AuditPayload,
    EntityType,
)

__all__ = [
    "AUTH_ACTIONS",
    "SENSITIVE_ACTIONS",
    "Actor",
    "AuditAction",
    "AuditFilters",
    "AuditPayload",
    "EntityType",
]
