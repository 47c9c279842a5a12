"""Domain model for audit events. Pure business semantics. No ORM or infrastructure."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class AuditAction(str, Enum):
    """Enumerated verbs an audit record can carry."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    LOGOUT = "logout"
    FAILED_LOGIN = "failed_login"
    RESET = "reset"
    PROMOTE = "promote"
    CONFIRM = "confirm"


# Actions surfaced by the "sensitive only" toggle
SENSITIVE_ACTIONS: FrozenSet[AuditAction] = frozenset({AuditAction.DELETE, AuditAction.RESET})

# Actions shown in the login history view
AUTH_ACTIONS: FrozenSet[AuditAction] = frozenset(
    {AuditAction.LOGIN, AuditAction.LOGOUT, AuditAction.FAILED_LOGIN}
)


class EntityType:
    """Entity categories emitted by the academy application. Free text is also accepted."""

    STUDENT = "student"
    ATTENDANCE = "attendance"
    EXAM = "exam"
    EXPENSE = "expense"
    SETTINGS = "settings"
    AUTH = "auth"
    BRANCH = "branch"
    PACKAGE = "package"
    INVOICE = "invoice"
    STOCK = "stock"


@dataclass(frozen=True)
class Actor:
    """
    Authenticated principal with its profile snapshot.
    role and branch_id are read at action time and copied onto the record.
    """

    user_id: str
    role: str
    branch_id: Optional[str] = None
    full_name: Optional[str] = None


@dataclass(frozen=True)
class AuditPayload:
    """Caller-supplied domain payload for one audited action. Documents are opaque JSON."""

    action: AuditAction
    entity_type: str
    summary_key: str
    entity_id: Optional[str] = None
    summary_params: Optional[Dict[str, Any]] = None
    before_data: Optional[Any] = None
    after_data: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None
    branch_id: Optional[str] = None


@dataclass(frozen=True)
class AuditFilters:
    """
    Filter set for trail queries. Both date bounds are inclusive whole days.
    Callers choose defaults; the reader requires explicit bounds.
    """

    date_from: date
    date_to: date
    branch_id: Optional[str] = None
    action: Optional[AuditAction] = None
    entity_type: Optional[str] = None
    sensitive_only: bool = False
    search_term: Optional[str] = None
    page: int = 1
    page_size: int = 50

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
