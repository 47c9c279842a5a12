"""Security alerts derived from recent audit entries. Pure rules over already-scoped entries."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from app.domain.models.audit import AuditAction, EntityType
from app.governance.audit_models import AuditLogEntry

DEFAULT_LARGE_EXPENSE_THRESHOLD = Decimal("1000")

# Only these actions can raise an alert; the scan skips everything else.
ALERT_ACTIONS = frozenset(
    {AuditAction.RESET, AuditAction.DELETE, AuditAction.CREATE, AuditAction.FAILED_LOGIN}
)


class AlertSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AlertType(str, Enum):
    RESET = "reset"
    EXPENSE_DELETE = "expense_delete"
    LARGE_EXPENSE = "large_expense"
    FAILED_LOGINS = "failed_logins"
    ATTENDANCE_DELETE = "attendance_delete"


@dataclass(frozen=True)
class SecurityAlert:
    id: str
    type: AlertType
    severity: AlertSeverity
    title: str
    description: str
    timestamp: str
    log_id: str
    entity_type: str
    entity_id: Optional[str]
    actor_name: str
    branch_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
            "log_id": self.log_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "actor_name": self.actor_name,
            "branch_name": self.branch_name,
        }


def _amount(after_data: Any) -> Optional[Decimal]:
    if not isinstance(after_data, dict):
        return None
    raw = after_data.get("amount")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return None


def _alert(entry: AuditLogEntry, kind: AlertType, severity: AlertSeverity, title: str, description: str) -> SecurityAlert:
    r = entry.record
    return SecurityAlert(
        id=r.id,
        type=kind,
        severity=severity,
        title=title,
        description=description,
        timestamp=r.created_at.isoformat(),
        log_id=r.id,
        entity_type=r.entity_type,
        entity_id=r.entity_id,
        actor_name=entry.actor_name,
        branch_name=entry.branch_name,
    )


def alerts_for_entry(entry: AuditLogEntry, large_expense_threshold: Decimal) -> List[SecurityAlert]:
    r = entry.record
    name = entry.actor_name
    if r.action is AuditAction.RESET:
        return [_alert(entry, AlertType.RESET, AlertSeverity.HIGH, "System Reset Executed",
                       f"{name} performed a system reset operation")]
    if r.action is AuditAction.DELETE and r.entity_type == EntityType.EXPENSE:
        return [_alert(entry, AlertType.EXPENSE_DELETE, AlertSeverity.MEDIUM, "Expense Deleted",
                       f"{name} deleted an expense record")]
    if r.action is AuditAction.DELETE and r.entity_type == EntityType.ATTENDANCE:
        return [_alert(entry, AlertType.ATTENDANCE_DELETE, AlertSeverity.MEDIUM, "Attendance Deleted",
                       f"{name} deleted an attendance record")]
    if r.action is AuditAction.CREATE and r.entity_type == EntityType.EXPENSE:
        amount = _amount(r.after_data)
        if amount is not None and amount >= large_expense_threshold:
            return [_alert(entry, AlertType.LARGE_EXPENSE, AlertSeverity.MEDIUM, "Large Expense Created",
                           f"{name} created an expense of {r.after_data['amount']}")]
        return []
    if r.action is AuditAction.FAILED_LOGIN:
        email = (r.metadata or {}).get("email") or "unknown user"
        return [_alert(entry, AlertType.FAILED_LOGINS, AlertSeverity.LOW, "Failed Login Attempt",
                       f"Failed login attempt for {email}")]
    return []


def derive_security_alerts(
    entries: Iterable[AuditLogEntry],
    large_expense_threshold: Decimal = DEFAULT_LARGE_EXPENSE_THRESHOLD,
    severity: Optional[AlertSeverity] = None,
) -> List[SecurityAlert]:
    """Alerts in entry order (most recent first when entries come from the reader)."""
    alerts: List[SecurityAlert] = []
    for entry in entries:
        alerts.extend(alerts_for_entry(entry, large_expense_threshold))
    if severity is not None:
        alerts = [a for a in alerts if a.severity is severity]
    return alerts
