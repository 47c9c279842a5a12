"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from app.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidActionError,
    InvalidDateRangeError,
    InvalidMetadataError,
)
from app.domain.models import (
    AUTH_ACTIONS,
    SENSITIVE_ACTIONS,
    Actor,
    AuditAction,
    AuditFilters,
    AuditPayload,
    EntityType,
)
from app.domain.schemas import AuditLogCreateRequest, AuditLogCreateResponse
from app.domain.validators import (
    parse_action,
    validate_audit_filters,
    validate_audit_payload,
    validate_date_range,
)

__all__ = [
    "AUTH_ACTIONS",
    "SENSITIVE_ACTIONS",
    "Actor",
    "AuditAction",
    "AuditFilters",
    "AuditLogCreateRequest",
    "AuditLogCreateResponse",
    "AuditPayload",
    "DomainError",
    "DomainValidationError",
    "EntityType",
    "InvalidActionError",
    "InvalidDateRangeError",
    "InvalidMetadataError",
    "parse_action",
    "validate_audit_filters",
    "validate_audit_payload",
    "validate_date_range",
]
