"""Validators for audit domain rules. Pure functions, no infrastructure or DB access."""

import json
from datetime import date
from typing import Any, Optional

from app.domain.exceptions import (
    DomainValidationError,
    InvalidActionError,
    InvalidDateRangeError,
    InvalidMetadataError,
)
from app.domain.models.audit import AuditAction, AuditFilters, AuditPayload

# Pagination bounds (domain constant; the upper bound is configurable per deployment)
MIN_PAGE = 1
MIN_PAGE_SIZE = 1


def parse_action(value: str) -> AuditAction:
    """Map a raw action string onto the closed verb set. Raises InvalidActionError if unknown."""
    try:
        return AuditAction(value.strip().lower())
    except (ValueError, AttributeError):
        allowed = ", ".join(a.value for a in AuditAction)
        raise InvalidActionError(f"Unknown action '{value}'. Must be one of: {allowed}") from None


def validate_json_serializable(name: str, value: Any) -> None:
    """Ensure an opaque payload document is JSON-serializable. Raises InvalidMetadataError if not."""
    if value is None:
        return
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        raise InvalidMetadataError(f"{name} must be JSON-serializable") from e


def validate_audit_payload(payload: AuditPayload) -> None:
    """
    Validate a write payload: action from the closed set, non-empty entity type and summary key,
    JSON-serializable documents. Raises domain exceptions on violation.
    """
    if not isinstance(payload.action, AuditAction):
        parse_action(str(payload.action))
    if not payload.entity_type or not payload.entity_type.strip():
        raise DomainValidationError("entity_type must not be empty")
    if not payload.summary_key or not payload.summary_key.strip():
        raise DomainValidationError("summary_key must not be empty")
    validate_json_serializable("summary_params", payload.summary_params)
    validate_json_serializable("before_data", payload.before_data)
    validate_json_serializable("after_data", payload.after_data)
    validate_json_serializable("metadata", payload.metadata)


def validate_date_range(date_from: Optional[date], date_to: Optional[date]) -> None:
    """Both bounds are required and must not be inverted."""
    if date_from is None or date_to is None:
        raise DomainValidationError("date_from and date_to are required")
    if date_from > date_to:
        raise InvalidDateRangeError(
            f"date_from ({date_from.isoformat()}) must not be after date_to ({date_to.isoformat()})"
        )


def validate_pagination(page: int, page_size: int, max_page_size: int) -> None:
    if page < MIN_PAGE:
        raise DomainValidationError(f"page must be >= {MIN_PAGE}, got {page}")
    if not (MIN_PAGE_SIZE <= page_size <= max_page_size):
        raise DomainValidationError(
            f"page_size must be between {MIN_PAGE_SIZE} and {max_page_size}, got {page_size}"
        )


def validate_audit_filters(filters: AuditFilters, max_page_size: int) -> None:
    """Reject malformed filters instead of silently returning an empty set."""
    validate_date_range(filters.date_from, filters.date_to)
    validate_pagination(filters.page, filters.page_size, max_page_size)
    if filters.action is not None and not isinstance(filters.action, AuditAction):
        parse_action(str(filters.action))
