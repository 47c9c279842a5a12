"""Immutable audit trail writer. No FastAPI."""

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from app.domain.models.audit import Actor, AuditPayload
from app.domain.validators.audit_validator import validate_audit_payload
from app.governance.audit_models import AuditRecord
from app.governance.audit_repository import AuditRepository
from app.governance.device_context import parse_request_context
from app.governance.exceptions import PersistenceError
from app.governance.ip_privacy import mask_ip
from app.observability.metrics import MetricsCollector


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


_TICK = timedelta(microseconds=1)


class MonotonicUtcClock:
    """UTC timestamps strictly increasing for the holder, even if the wall clock stalls or steps back."""

    def __init__(self, source: Callable[[], datetime] = _utc_now) -> None:
        self._source = source
        self._lock = threading.Lock()
        self._last: Optional[datetime] = None

    def __call__(self) -> datetime:
        with self._lock:
            now = self._source()
            if now.tzinfo is None:
                now = now.replace(tzinfo=timezone.utc)
            else:
                now = now.astimezone(timezone.utc)
            if self._last is not None and now <= self._last:
                now = self._last + _TICK
            self._last = now
            return now


class AuditLogger:
    """
    Appends one immutable record per audited action.
    Device facts and the masked IP are computed here, at write time, and stored with the record.
    No reads of prior history, no retries: a store failure surfaces as PersistenceError.
    """

    def __init__(
        self,
        repository: AuditRepository,
        metrics: Optional[MetricsCollector] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[MonotonicUtcClock] = None,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._repository = repository
        self._metrics = metrics
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock or MonotonicUtcClock()
        self._id_factory = id_factory

    def build_record(
        self,
        actor: Actor,
        payload: AuditPayload,
        headers: Mapping[str, str],
    ) -> AuditRecord:
        """Merge actor snapshot, request context and payload into a new record."""
        validate_audit_payload(payload)
        context = parse_request_context(headers)
        return AuditRecord(
            id=self._id_factory(),
            created_at=self._clock(),
            actor_user_id=actor.user_id,
            actor_role=actor.role,
            branch_id=payload.branch_id or actor.branch_id,
            action=payload.action,
            entity_type=payload.entity_type,
            entity_id=payload.entity_id,
            summary_key=payload.summary_key,
            summary_params=payload.summary_params,
            before_data=payload.before_data,
            after_data=payload.after_data,
            metadata=payload.metadata,
            ip_address=context.ip_address,
            ip_masked=mask_ip(context.ip_address),
            user_agent=context.user_agent,
            device_name=context.device.device_name,
            os_name=context.device.os_name,
            browser_name=context.device.browser_name,
            is_mobile=context.device.is_mobile,
        )

    async def log_action(
        self,
        *,
        actor: Actor,
        payload: AuditPayload,
        headers: Mapping[str, str],
    ) -> str:
        """Write one immutable audit record. Returns the generated record id."""
        record = self.build_record(actor, payload, headers)
        try:
            await self._repository.save(record)
        except PersistenceError as e:
            self._logger.error(
                "audit_write_failed",
                extra={
                    "actor_id": actor.user_id,
                    "audit_action": record.action.value,
                    "entity_type": record.entity_type,
                    "error": e.message,
                },
            )
            if self._metrics is not None:
                self._metrics.increment("audit_write_failures")
            raise
        self._logger.info(
            "audit_record_written",
            extra={
                "log_id": record.id,
                "actor_id": actor.user_id,
                "audit_action": record.action.value,
                "entity_type": record.entity_type,
                "branch_id": record.branch_id,
            },
        )
        if self._metrics is not None:
            self._metrics.increment("audit_records_written", action=record.action.value)
        return record.id


async def record_audit_safely(
    audit_logger: AuditLogger,
    *,
    actor: Actor,
    payload: AuditPayload,
    headers: Mapping[str, str],
) -> Optional[str]:
    """
    Best-effort write for call sites that audit after a primary mutation.
    A logging failure is reported to operational logs and never blocks or rolls back the caller.
    """
    try:
        return await audit_logger.log_action(actor=actor, payload=payload, headers=headers)
    except Exception:
        logging.getLogger(__name__).exception(
            "audit_write_skipped action=%s entity_type=%s actor=%s",
            getattr(payload.action, "value", payload.action),
            payload.entity_type,
            actor.user_id,
        )
        return None
