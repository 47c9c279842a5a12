"""Immutable audit record model and read-side projections. Domain-level immutability."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional

from app.domain.models.audit import AuditAction

UNKNOWN_ACTOR = "Unknown"
GLOBAL_BRANCH = "Global"


@dataclass(frozen=True)
class DeviceInfo:
    """Structured facts derived from a user-agent string."""

    device_name: str
    os_name: str
    browser_name: str
    is_mobile: bool


@dataclass(frozen=True)
class AuditRecord:
    """
    Immutable audit record: who, what, when (UTC), where from.
    Device facts and ip_masked are frozen at write time and never re-derived.
    """

    id: str
    created_at: datetime
    actor_user_id: str
    actor_role: str
    branch_id: Optional[str]
    action: AuditAction
    entity_type: str
    entity_id: Optional[str]
    summary_key: str
    summary_params: Optional[Dict[str, Any]]
    before_data: Optional[Any]
    after_data: Optional[Any]
    metadata: Optional[Dict[str, Any]]
    ip_address: Optional[str]
    ip_masked: Optional[str]
    user_agent: str
    device_name: str
    os_name: str
    browser_name: str
    is_mobile: bool

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging and API output."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "actor_user_id": self.actor_user_id,
            "actor_role": self.actor_role,
            "branch_id": self.branch_id,
            "action": self.action.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "summary_key": self.summary_key,
            "summary_params": self.summary_params,
            "before_data": self.before_data,
            "after_data": self.after_data,
            "metadata": self.metadata,
            "ip_address": self.ip_address,
            "ip_masked": self.ip_masked,
            "user_agent": self.user_agent,
            "device_name": self.device_name,
            "os_name": self.os_name,
            "browser_name": self.browser_name,
            "is_mobile": self.is_mobile,
        }


@dataclass(frozen=True)
class AuditLogEntry:
    """A record joined with the actor's and branch's display names."""

    record: AuditRecord
    actor_name: str = UNKNOWN_ACTOR
    branch_name: str = GLOBAL_BRANCH

    def to_dict(self, visible_fields: FrozenSet[str], summary: Optional[str] = None) -> Dict[str, Any]:
        """Project onto the fields the viewer may see. Withheld fields are omitted, not nulled."""
        data = self.record.to_dict()
        data["actor_name"] = self.actor_name
        data["branch_name"] = self.branch_name
        if summary is not None:
            data["summary"] = summary
        return {k: v for k, v in data.items() if k in visible_fields}


@dataclass(frozen=True)
class AuditQuery:
    """
    Store-level query, already scoped by the access policy.
    created_from is inclusive, created_before exclusive. actions=None means any action.
    """

    created_from: datetime
    created_before: datetime
    branch_id: Optional[str] = None
    actions: Optional[FrozenSet[AuditAction]] = None
    entity_type: Optional[str] = None
    search_term: Optional[str] = None
    offset: int = 0
    limit: int = 50


@dataclass(frozen=True)
class AuditPage:
    """One page of entries plus the total size of the filtered set."""

    records: List[AuditLogEntry] = field(default_factory=list)
    total_count: int = 0
