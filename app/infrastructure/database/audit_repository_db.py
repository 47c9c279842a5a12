"""DB-backed audit repository. Appends to and queries the audit_logs table."""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.audit import AUTH_ACTIONS, AuditAction
from app.governance.audit_models import (
    GLOBAL_BRANCH,
    UNKNOWN_ACTOR,
    AuditLogEntry,
    AuditPage,
    AuditQuery,
    AuditRecord,
)
from app.governance.exceptions import PersistenceError
from app.infrastructure.database.models import AuditLogRow, BranchRow, ProfileRow


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _record_to_row(record: AuditRecord) -> AuditLogRow:
    return AuditLogRow(
        id=record.id,
        created_at=record.created_at,
        actor_user_id=record.actor_user_id,
        actor_role=record.actor_role,
        branch_id=record.branch_id,
        action=record.action.value,
        entity_type=record.entity_type,
        entity_id=record.entity_id,
        summary_key=record.summary_key,
        summary_params=record.summary_params,
        before_data=record.before_data,
        after_data=record.after_data,
        metadata_=record.metadata,
        ip_address=record.ip_address,
        ip_masked=record.ip_masked,
        user_agent=record.user_agent,
        device_name=record.device_name,
        os_name=record.os_name,
        browser_name=record.browser_name,
        is_mobile=bool(record.is_mobile),
    )


def _row_to_record(row: AuditLogRow) -> AuditRecord:
    return AuditRecord(
        id=row.id,
        created_at=_as_utc(row.created_at),
        actor_user_id=row.actor_user_id,
        actor_role=row.actor_role,
        branch_id=row.branch_id,
        action=AuditAction(row.action),
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        summary_key=row.summary_key,
        summary_params=row.summary_params,
        before_data=row.before_data,
        after_data=row.after_data,
        metadata=row.metadata_,
        ip_address=row.ip_address,
        ip_masked=row.ip_masked,
        user_agent=row.user_agent,
        device_name=row.device_name,
        os_name=row.os_name,
        browser_name=row.browser_name,
        is_mobile=bool(row.is_mobile),
    )


def _actor_name(record: AuditRecord, full_name: Optional[str]) -> str:
    """Profile name; authentication events fall back to the email they were attempted with."""
    if full_name:
        return full_name
    if record.action in AUTH_ACTIONS and isinstance(record.metadata, dict):
        email = record.metadata.get("email")
        if email:
            return str(email)
    return UNKNOWN_ACTOR


def _to_entry(row: AuditLogRow, full_name: Optional[str], branch_name: Optional[str]) -> AuditLogEntry:
    record = _row_to_record(row)
    return AuditLogEntry(
        record=record,
        actor_name=_actor_name(record, full_name),
        branch_name=branch_name or GLOBAL_BRANCH,
    )


def _enriched_select():
    return (
        select(AuditLogRow, ProfileRow.full_name, BranchRow.branch_name)
        .outerjoin(ProfileRow, ProfileRow.id == AuditLogRow.actor_user_id)
        .outerjoin(BranchRow, BranchRow.id == AuditLogRow.branch_id)
    )


def _conditions(query: AuditQuery) -> List[Any]:
    conditions: List[Any] = [
        AuditLogRow.created_at >= query.created_from,
        AuditLogRow.created_at < query.created_before,
    ]
    if query.branch_id is not None:
        conditions.append(AuditLogRow.branch_id == query.branch_id)
    if query.actions is not None:
        conditions.append(AuditLogRow.action.in_(sorted(a.value for a in query.actions)))
    if query.entity_type is not None:
        conditions.append(AuditLogRow.entity_type == query.entity_type)
    if query.search_term:
        term = query.search_term
        matches = [
            ProfileRow.full_name.icontains(term, autoescape=True),
            AuditLogRow.summary_key.icontains(term, autoescape=True),
            AuditLogRow.entity_type.icontains(term, autoescape=True),
            and_(
                AuditLogRow.action.in_(sorted(a.value for a in AUTH_ACTIONS)),
                AuditLogRow.metadata_["email"].as_string().icontains(term, autoescape=True),
            ),
        ]
        conditions.append(or_(*matches))
    return conditions


class DbAuditRepository:
    """Implements the AuditRepository protocol over SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, record: AuditRecord) -> None:
        """Insert exactly one row and commit. Store failures surface as PersistenceError."""
        self._session.add(_record_to_row(record))
        try:
            await self._session.flush()
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise PersistenceError(f"Audit write failed: {e}") from e

    async def query(self, query: AuditQuery) -> AuditPage:
        conditions = _conditions(query)
        count_stmt = (
            select(func.count(AuditLogRow.id))
            .select_from(AuditLogRow)
            .outerjoin(ProfileRow, ProfileRow.id == AuditLogRow.actor_user_id)
            .where(*conditions)
        )
        page_stmt = (
            _enriched_select()
            .where(*conditions)
            .order_by(AuditLogRow.created_at.desc(), AuditLogRow.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        try:
            total = (await self._session.execute(count_stmt)).scalar_one()
            rows = (await self._session.execute(page_stmt)).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Audit query failed: {e}") from e
        return AuditPage(
            records=[_to_entry(row, full_name, branch_name) for row, full_name, branch_name in rows],
            total_count=int(total),
        )

    async def get(self, record_id: str) -> Optional[AuditLogEntry]:
        stmt = _enriched_select().where(AuditLogRow.id == record_id)
        try:
            result = (await self._session.execute(stmt)).first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Audit lookup failed: {e}") from e
        if result is None:
            return None
        row, full_name, branch_name = result
        return _to_entry(row, full_name, branch_name)
