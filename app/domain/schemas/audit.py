"""Pydantic schemas for the audit write API. Strict validation, no DB or infrastructure."""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.models.audit import AuditAction, AuditPayload


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class AuditLogCreateRequest(BaseModel):
    """Write request body. Field names follow the client's camelCase wire format."""

    model_config = ConfigDict(populate_by_name=True)

    action: AuditAction
    entity_type: str = Field(..., alias="entityType", min_length=1)
    entity_id: Optional[str] = Field(None, alias="entityId")
    summary_key: str = Field(..., alias="summaryKey", min_length=1)
    summary_params: Optional[Dict[str, Any]] = Field(None, alias="summaryParams")
    before_data: Optional[Any] = Field(None, alias="beforeData")
    after_data: Optional[Any] = Field(None, alias="afterData")
    metadata: Optional[Dict[str, Any]] = None
    branch_id: Optional[str] = Field(None, alias="branchId")

    @field_validator("entity_id", "branch_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Optional[str]:
        """Numeric identifiers are accepted and stored as strings; empty strings mean absent."""
        if v is None or v == "":
            return None
        if isinstance(v, bool):
            raise ValueError("identifier must be a string or number")
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("summary_params", "before_data", "after_data", "metadata")
    @classmethod
    def documents_must_be_json_serializable(cls, v: Any) -> Any:
        if v is None:
            return v
        try:
            json.dumps(v)
        except (TypeError, ValueError) as e:
            raise ValueError("payload documents must be JSON-serializable") from e
        return v

    def to_payload(self) -> AuditPayload:
        return AuditPayload(
            action=self.action,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            summary_key=self.summary_key,
            summary_params=self.summary_params,
            before_data=self.before_data,
            after_data=self.after_data,
            metadata=self.metadata,
            branch_id=self.branch_id,
        )


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------

class AuditLogCreateResponse(BaseModel):
    """Write response: identifier of the appended record."""

    success: bool = True
    log_id: str
