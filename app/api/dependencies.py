"""FastAPI dependency injection: settings, DB-backed repositories, writer, reader, current actor."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.actor_resolver import ActorResolver
from app.config.settings import AppSettings, get_settings
from app.core.context import actor_id_ctx
from app.domain.models.audit import Actor
from app.governance.audit_logger import AuditLogger, MonotonicUtcClock
from app.governance.audit_reader import AuditReader
from app.governance.summary_renderer import SummaryTemplateRegistry, default_registry
from app.infrastructure.database.audit_repository_db import DbAuditRepository
from app.infrastructure.database.profile_directory_db import DbProfileDirectory
from app.infrastructure.database.session import get_db
from app.observability.metrics import MetricsCollector
from app.security.identity import IdentityVerifier
from app.security.rbac import AccessPolicy

_metrics: MetricsCollector | None = None
_clock: MonotonicUtcClock | None = None
_verifier: IdentityVerifier | None = None


def get_metrics() -> MetricsCollector:
    """Return singleton metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_clock() -> MonotonicUtcClock:
    """Process-wide clock, so created_at strictly increases across requests."""
    global _clock
    if _clock is None:
        _clock = MonotonicUtcClock()
    return _clock


def get_identity_verifier(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> IdentityVerifier:
    """Return singleton bearer token verifier."""
    global _verifier
    if _verifier is None:
        _verifier = IdentityVerifier(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            audience=settings.jwt_audience,
        )
    return _verifier


def get_summary_registry() -> SummaryTemplateRegistry:
    return default_registry


def get_access_policy() -> AccessPolicy:
    return AccessPolicy()


async def get_actor_resolver(
    db: Annotated[AsyncSession, Depends(get_db)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> ActorResolver:
    return ActorResolver(verifier=verifier, directory=DbProfileDirectory(db))


async def get_audit_logger(
    db: Annotated[AsyncSession, Depends(get_db)],
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
    clock: Annotated[MonotonicUtcClock, Depends(get_clock)],
) -> AuditLogger:
    """Build AuditLogger with injected repository, metrics, clock, logger."""
    return AuditLogger(
        repository=DbAuditRepository(db),
        metrics=metrics,
        logger=logging.getLogger("app.governance.audit_logger"),
        clock=clock,
    )


async def get_audit_reader(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[AppSettings, Depends(get_settings)],
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
    registry: Annotated[SummaryTemplateRegistry, Depends(get_summary_registry)],
) -> AuditReader:
    return AuditReader(
        repository=DbAuditRepository(db),
        policy=policy,
        registry=registry,
        max_page_size=settings.audit_max_page_size,
    )


async def get_current_actor(
    resolver: Annotated[ActorResolver, Depends(get_actor_resolver)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> Actor:
    """Resolve the bearer credential to an actor; errors map to 401/404 in app.main."""
    actor = await resolver.resolve(authorization)
    actor_id_ctx.set(actor.user_id)
    return actor
