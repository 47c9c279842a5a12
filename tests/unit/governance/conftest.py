"""Fixtures for governance tests: audit entry factory and in-memory repository."""

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from app.domain.models.audit import AuditAction
from app.governance.audit_models import AuditLogEntry, AuditPage, AuditQuery, AuditRecord


def build_entry(
    action: AuditAction = AuditAction.CREATE,
    entity_type: str = "student",
    branch_id: Optional[str] = "b-1",
    created_at: Optional[datetime] = None,
    actor_name: str = "Maya",
    branch_name: str = "Downtown",
    **fields,
) -> AuditLogEntry:
    data = dict(
        id=str(uuid.uuid4()),
        created_at=created_at or datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        actor_user_id="u-1",
        actor_role="branch_manager",
        branch_id=branch_id,
        action=action,
        entity_type=entity_type,
        entity_id="x-1",
        summary_key="audit.student.created",
        summary_params={"name": "Ana"},
        before_data=None,
        after_data=None,
        metadata=None,
        ip_address="203.0.113.7",
        ip_masked="203.0.*.*",
        user_agent="Mozilla/5.0",
        device_name="Windows PC",
        os_name="Windows 10/11",
        browser_name="Chrome",
        is_mobile=False,
    )
    data.update(fields)
    return AuditLogEntry(record=AuditRecord(**data), actor_name=actor_name, branch_name=branch_name)


class FakeAuditRepository:
    """In-memory AuditRepository; records the last query it was asked to serve."""

    def __init__(self, entries=None):
        self.entries = list(entries or [])
        self.saved = []
        self.queries: list[AuditQuery] = []

    async def save(self, record):
        self.saved.append(record)

    async def query(self, query: AuditQuery) -> AuditPage:
        self.queries.append(query)
        matched = [
            e for e in self.entries
            if query.created_from <= e.record.created_at < query.created_before
            and (query.branch_id is None or e.record.branch_id == query.branch_id)
            and (query.actions is None or e.record.action in query.actions)
            and (query.entity_type is None or e.record.entity_type == query.entity_type)
        ]
        matched.sort(key=lambda e: (e.record.created_at, e.record.id), reverse=True)
        return AuditPage(records=matched[query.offset:query.offset + query.limit], total_count=len(matched))

    async def get(self, record_id):
        for e in self.entries:
            if e.record.id == record_id:
                return e
        return None


@pytest.fixture
def make_entry():
    return build_entry


@pytest.fixture
def fake_repository():
    return FakeAuditRepository()
