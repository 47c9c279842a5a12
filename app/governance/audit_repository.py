"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol

from app.governance.audit_models import AuditLogEntry, AuditPage, AuditQuery, AuditRecord


class AuditRepository(Protocol):
    """Append-only store for audit records. No update or delete operations exist."""

    async def save(self, record: AuditRecord) -> None:
        """Persist an immutable audit record. Must not allow mutation."""
        ...

    async def query(self, query: AuditQuery) -> AuditPage:
        """Return one page ordered by created_at DESC, id DESC, enriched with display names."""
        ...

    async def get(self, record_id: str) -> Optional[AuditLogEntry]:
        """Return a single enriched record, or None."""
        ...
