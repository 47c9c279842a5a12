"""Role-scoped, filtered, paginated reads over the audit trail. No FastAPI."""

import logging
from dataclasses import replace
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, FrozenSet, List, Optional

from app.domain.models.audit import (
    AUTH_ACTIONS,
    SENSITIVE_ACTIONS,
    Actor,
    AuditAction,
    AuditFilters,
)
from app.domain.validators.audit_validator import validate_audit_filters
from app.governance.audit_models import AuditLogEntry, AuditPage, AuditQuery
from app.governance.audit_repository import AuditRepository
from app.governance.exceptions import AuditRecordNotFoundError
from app.governance.summary_renderer import SummaryTemplateRegistry, render_summary
from app.security.rbac import AccessPolicy

DEFAULT_MAX_PAGE_SIZE = 500


def _day_start(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _action_scope(
    base: Optional[FrozenSet[AuditAction]],
    action: Optional[AuditAction],
    sensitive_only: bool,
) -> Optional[FrozenSet[AuditAction]]:
    """Intersect the presentation's fixed set, the explicit action filter and the sensitive toggle."""
    scope = base
    if action is not None:
        scope = frozenset({action}) if scope is None else scope & {action}
    if sensitive_only:
        scope = SENSITIVE_ACTIONS if scope is None else scope & SENSITIVE_ACTIONS
    return scope


class AuditReader:
    """
    Serves the activity log and login history. The access policy narrows branch scope before
    the store is queried; output is redacted per caller role.
    """

    def __init__(
        self,
        repository: AuditRepository,
        policy: Optional[AccessPolicy] = None,
        registry: Optional[SummaryTemplateRegistry] = None,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repository = repository
        self._policy = policy or AccessPolicy()
        self._registry = registry
        self._max_page_size = max_page_size
        self._logger = logger or logging.getLogger(__name__)

    def build_query(
        self,
        viewer: Actor,
        filters: AuditFilters,
        base_actions: Optional[FrozenSet[AuditAction]] = None,
    ) -> AuditQuery:
        """Validate filters and translate them into a scoped store query."""
        validate_audit_filters(filters, self._max_page_size)
        branch_scope = self._policy.resolve_branch_scope(viewer, filters.branch_id)
        search = (filters.search_term or "").strip() or None
        return AuditQuery(
            created_from=_day_start(filters.date_from),
            created_before=_day_start(filters.date_to + timedelta(days=1)),
            branch_id=branch_scope,
            actions=_action_scope(base_actions, filters.action, filters.sensitive_only),
            entity_type=(filters.entity_type or "").strip() or None,
            search_term=search,
            offset=filters.offset,
            limit=filters.page_size,
        )

    def _redact(self, viewer: Actor, entry: AuditLogEntry) -> AuditLogEntry:
        """Blank the raw IP for roles that may only see the masked form."""
        if self._policy.can_view_raw_ip(viewer.role) or entry.record.ip_address is None:
            return entry
        return replace(entry, record=replace(entry.record, ip_address=None))

    async def _run(self, viewer: Actor, query: AuditQuery) -> AuditPage:
        if query.actions is not None and not query.actions:
            return AuditPage(records=[], total_count=0)
        page = await self._repository.query(query)
        self._logger.info(
            "audit_query_served",
            extra={
                "branch_id": query.branch_id,
                "offset": query.offset,
                "returned": len(page.records),
                "total_count": page.total_count,
            },
        )
        return AuditPage(
            records=[self._redact(viewer, entry) for entry in page.records],
            total_count=page.total_count,
        )

    async def list_activity(self, viewer: Actor, filters: AuditFilters) -> AuditPage:
        """General activity log: every action, optional sensitive-only restriction."""
        return await self._run(viewer, self.build_query(viewer, filters))

    async def list_logins(self, viewer: Actor, filters: AuditFilters) -> AuditPage:
        """Login history: authentication events only."""
        return await self._run(viewer, self.build_query(viewer, filters, base_actions=AUTH_ACTIONS))

    async def scan_activity(
        self,
        viewer: Actor,
        filters: AuditFilters,
        base_actions: Optional[FrozenSet[AuditAction]] = None,
    ) -> List[AuditLogEntry]:
        """
        Every matching entry in the window, newest first, fetched page by page
        at filters.page_size. filters.page is ignored.
        """
        entries: List[AuditLogEntry] = []
        page_number = 1
        while True:
            query = self.build_query(viewer, replace(filters, page=page_number), base_actions)
            page = await self._run(viewer, query)
            entries.extend(page.records)
            if not page.records or len(entries) >= page.total_count:
                return entries
            page_number += 1

    async def get_entry(self, viewer: Actor, record_id: str) -> AuditLogEntry:
        """Single record within the viewer's scope. Out-of-scope records are reported as missing."""
        branch_scope = self._policy.resolve_branch_scope(viewer, None)
        entry = await self._repository.get(record_id)
        if entry is None or (branch_scope is not None and entry.record.branch_id != branch_scope):
            raise AuditRecordNotFoundError(f"Audit record '{record_id}' not found")
        return self._redact(viewer, entry)

    def summary_of(self, entry: AuditLogEntry) -> str:
        return render_summary(entry.record.summary_key, entry.record.summary_params, self._registry)

    def present(self, viewer: Actor, entry: AuditLogEntry) -> Dict[str, Any]:
        """Redacted, display-ready dict: raw IP only for privileged roles, summary rendered."""
        return entry.to_dict(self._policy.visible_fields(viewer.role), summary=self.summary_of(entry))

    def present_page(self, viewer: Actor, page: AuditPage) -> Dict[str, Any]:
        records: List[Dict[str, Any]] = [self.present(viewer, entry) for entry in page.records]
        return {"records": records, "total_count": page.total_count}
