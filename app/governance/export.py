"""CSV rendering of an already-fetched, page-bounded result set."""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from app.governance.audit_models import AuditLogEntry
from app.governance.summary_renderer import SummaryTemplateRegistry, render_summary

ACTIVITY_COLUMNS = (
    "Date/Time",
    "User",
    "Role",
    "Branch",
    "Action",
    "Entity Type",
    "Entity ID",
    "Device",
    "OS",
    "Browser",
    "IP",
    "Summary",
)

LOGIN_HISTORY_COLUMNS = (
    "Date/Time",
    "User",
    "Role",
    "Branch",
    "Status",
    "Device",
    "OS",
    "Browser",
    "Mobile",
    "IP",
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
ACTIVITY_EXPORT_PREFIX = "activity-log"
LOGIN_HISTORY_EXPORT_PREFIX = "login-history"


def quote_cell(value: object) -> str:
    """Wrap in double quotes, doubling any embedded quote. None becomes an empty cell."""
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def to_delimited(rows: Iterable[Sequence[object]], delimiter: str = ",") -> str:
    return "\n".join(delimiter.join(quote_cell(cell) for cell in row) for row in rows)


def _ip_cell(entry: AuditLogEntry, include_raw_ip: bool) -> Optional[str]:
    return entry.record.ip_address if include_raw_ip else entry.record.ip_masked


def export_activity_csv(
    entries: Sequence[AuditLogEntry],
    include_raw_ip: bool,
    registry: Optional[SummaryTemplateRegistry] = None,
) -> str:
    rows: List[Sequence[object]] = [ACTIVITY_COLUMNS]
    for entry in entries:
        r = entry.record
        rows.append(
            (
                r.created_at.strftime(TIMESTAMP_FORMAT),
                entry.actor_name,
                r.actor_role,
                entry.branch_name,
                r.action.value,
                r.entity_type,
                r.entity_id,
                r.device_name,
                r.os_name,
                r.browser_name,
                _ip_cell(entry, include_raw_ip),
                render_summary(r.summary_key, r.summary_params, registry),
            )
        )
    return to_delimited(rows)


def export_login_history_csv(entries: Sequence[AuditLogEntry], include_raw_ip: bool) -> str:
    rows: List[Sequence[object]] = [LOGIN_HISTORY_COLUMNS]
    for entry in entries:
        r = entry.record
        rows.append(
            (
                r.created_at.strftime(TIMESTAMP_FORMAT),
                entry.actor_name,
                r.actor_role,
                entry.branch_name,
                r.action.value,
                r.device_name,
                r.os_name,
                r.browser_name,
                "Yes" if r.is_mobile else "No",
                _ip_cell(entry, include_raw_ip),
            )
        )
    return to_delimited(rows)


def export_filename(prefix: str, date_from: date, date_to: date) -> str:
    return f"{prefix}-{date_from.isoformat()}-to-{date_to.isoformat()}.csv"
