"""Summary templates: key -> template registry plus lenient {placeholder} substitution."""

import re
import threading
from typing import Any, Dict, Mapping, Optional

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

DEFAULT_TEMPLATES: Dict[str, str] = {
    "audit.auth.login": "{email} signed in",
    "audit.auth.logout": "{email} signed out",
    "audit.auth.failed_login": "Failed login attempt for {email}",
    "audit.expense.created": "Expense created: {amount} ({category})",
    "audit.expense.updated": "Expense updated: {amount} ({category})",
    "audit.expense.deleted": "Expense deleted: {amount} ({category})",
    "audit.student.created": "Student {name} added",
    "audit.student.updated": "Student {name} updated",
    "audit.student.deleted": "Student {name} removed",
    "audit.student.promoted": "Student {name} promoted to {belt}",
    "audit.attendance.confirmed": "Attendance confirmed for {date}",
    "audit.attendance.deleted": "Attendance removed for {name} on {date}",
    "audit.exam.confirmed": "Exam results confirmed for {name}",
    "audit.settings.updated": "Settings updated",
    "audit.system.reset": "System reset: {scope}",
}


class SummaryTemplateRegistry:
    """
    Key -> template mapping. Records store the key, never rendered text, so the trail stays
    locale-neutral. Unknown keys render as themselves, which lets a raw template be used as a key.
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None) -> None:
        self._lock = threading.Lock()
        self._templates: Dict[str, str] = dict(templates or {})

    def register(self, key: str, template: str) -> None:
        if not key or not key.strip():
            raise ValueError("summary key must not be empty")
        with self._lock:
            self._templates[key] = template

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._templates.get(key)

    def resolve(self, key: str) -> str:
        template = self.get(key)
        return template if template is not None else key


default_registry = SummaryTemplateRegistry(DEFAULT_TEMPLATES)


def substitute(template: str, params: Optional[Mapping[str, Any]]) -> str:
    """Replace {name} with str(params[name]). Unmatched placeholders are left verbatim."""
    if not params or not isinstance(params, Mapping):
        return template

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in params:
            return match.group(0)
        return str(params[name])

    return _PLACEHOLDER_RE.sub(_replace, template)


def render_summary(
    summary_key: str,
    summary_params: Optional[Mapping[str, Any]],
    registry: Optional[SummaryTemplateRegistry] = None,
) -> str:
    """Expand a stored summary key for display. Never raises on template/parameter drift."""
    template = (registry or default_registry).resolve(summary_key)
    return substitute(template, summary_params)
