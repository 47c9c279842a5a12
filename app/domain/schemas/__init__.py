"""Domain schemas. Request/response and validation."""

from app.domain.schemas.audit import (
    AuditLogCreateRequest,
    AuditLogCreateResponse,
)

__all__ = [
    "AuditLogCreateRequest",
    "AuditLogCreateResponse",
]
