"""Domain validators. Pure validation functions."""

from app.domain.validators.audit_validator import (
    parse_action,
    validate_audit_filters,
    validate_audit_payload,
    validate_date_range,
    validate_json_serializable,
    validate_pagination,
)

__all__ = [
    "parse_action",
    "validate_audit_filters",
    "validate_audit_payload",
    "validate_date_range",
    "validate_json_serializable",
    "validate_pagination",
]
