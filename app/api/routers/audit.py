"""Audit API router: append records, activity log, login history, detail, CSV export, security alerts."""

import json
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from app.api.dependencies import (
    get_access_policy,
    get_actor_resolver,
    get_audit_logger,
    get_audit_reader,
    get_current_actor,
    get_summary_registry,
)
from app.application.actor_resolver import ActorResolver
from app.config.settings import AppSettings, get_settings
from app.core.context import actor_id_ctx
from app.domain.exceptions import DomainValidationError
from app.domain.models.audit import Actor, AuditFilters
from app.domain.schemas.audit import AuditLogCreateRequest, AuditLogCreateResponse
from app.domain.validators.audit_validator import parse_action
from app.governance.audit_logger import AuditLogger
from app.governance.audit_reader import AuditReader
from app.governance.exceptions import PersistenceError
from app.governance.export import (
    ACTIVITY_EXPORT_PREFIX,
    LOGIN_HISTORY_EXPORT_PREFIX,
    export_activity_csv,
    export_filename,
    export_login_history_csv,
)
from app.governance.security_alerts import ALERT_ACTIONS, AlertSeverity, derive_security_alerts
from app.governance.snapshots import changed_fields
from app.governance.summary_renderer import SummaryTemplateRegistry
from app.security.exceptions import ProfileNotFoundError, UnauthorizedError
from app.security.rbac import AccessPolicy

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_HISTORY_DEFAULT_DAYS = 7


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _filters(
    date_from: Optional[date],
    date_to: Optional[date],
    default_from: date,
    branch_id: Optional[str],
    action: Optional[str],
    entity_type: Optional[str],
    sensitive_only: bool,
    search: Optional[str],
    page: int,
    page_size: Optional[int],
    settings: AppSettings,
) -> AuditFilters:
    """Apply the read surface's defaults; the reader validates the result."""
    return AuditFilters(
        date_from=date_from or default_from,
        date_to=date_to or _today(),
        branch_id=branch_id or None,
        action=parse_action(action) if action else None,
        entity_type=entity_type or None,
        sensitive_only=sensitive_only,
        search_term=search,
        page=page,
        page_size=page_size if page_size is not None else settings.audit_page_size,
    )


def _csv_response(body: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/logs", response_model=AuditLogCreateResponse)
async def create_audit_log(
    request: Request,
    authorization: Annotated[Optional[str], Header()] = None,
    resolver: Annotated[ActorResolver, Depends(get_actor_resolver)] = ...,
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)] = ...,
):
    """Append one audit record for the authenticated caller. Errors use the {error} shape."""
    try:
        actor = await resolver.resolve(authorization)
    except UnauthorizedError as e:
        return _error(401, e.message)
    except ProfileNotFoundError as e:
        return _error(404, e.message)
    actor_id_ctx.set(actor.user_id)

    try:
        raw = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Request body must be valid JSON")
    try:
        body = AuditLogCreateRequest.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return _error(400, message)

    try:
        log_id = await audit_logger.log_action(
            actor=actor,
            payload=body.to_payload(),
            headers=request.headers,
        )
    except DomainValidationError as e:
        return _error(400, e.message)
    except PersistenceError as e:
        return _error(500, e.message)
    return AuditLogCreateResponse(success=True, log_id=log_id)


@router.get("/logs")
async def list_activity(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[str] = None,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    sensitive_only: bool = False,
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
    settings: Annotated[AppSettings, Depends(get_settings)] = ...,
):
    """Activity log page, newest first. Dates default to today (UTC)."""
    filters = _filters(
        date_from, date_to, _today(), branch_id, action, entity_type,
        sensitive_only, search, page, page_size, settings,
    )
    result = await reader.list_activity(actor, filters)
    return reader.present_page(actor, result)


@router.get("/logs/export")
async def export_activity(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[str] = None,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    sensitive_only: bool = False,
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)] = ...,
    registry: Annotated[SummaryTemplateRegistry, Depends(get_summary_registry)] = ...,
    settings: Annotated[AppSettings, Depends(get_settings)] = ...,
):
    """CSV of the same page the activity view would show."""
    filters = _filters(
        date_from, date_to, _today(), branch_id, action, entity_type,
        sensitive_only, search, page, page_size, settings,
    )
    result = await reader.list_activity(actor, filters)
    body = export_activity_csv(result.records, policy.can_view_raw_ip(actor.role), registry)
    filename = export_filename(ACTIVITY_EXPORT_PREFIX, filters.date_from, filters.date_to)
    return _csv_response(body, filename)


@router.get("/logs/{record_id}")
async def get_activity_entry(
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
):
    """Single record with the list of fields that differ between before and after snapshots."""
    entry = await reader.get_entry(actor, record_id)
    presented = reader.present(actor, entry)
    presented["changed_fields"] = changed_fields(entry.record.before_data, entry.record.after_data)
    return presented


@router.get("/logins")
async def list_logins(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[str] = None,
    action: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
    settings: Annotated[AppSettings, Depends(get_settings)] = ...,
):
    """Login history page. Dates default to the last seven days (UTC)."""
    filters = _filters(
        date_from, date_to, _today() - timedelta(days=LOGIN_HISTORY_DEFAULT_DAYS),
        branch_id, action, None, False, search, page, page_size, settings,
    )
    result = await reader.list_logins(actor, filters)
    return reader.present_page(actor, result)


@router.get("/logins/export")
async def export_logins(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[str] = None,
    action: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)] = ...,
    settings: Annotated[AppSettings, Depends(get_settings)] = ...,
):
    filters = _filters(
        date_from, date_to, _today() - timedelta(days=LOGIN_HISTORY_DEFAULT_DAYS),
        branch_id, action, None, False, search, page, page_size, settings,
    )
    result = await reader.list_logins(actor, filters)
    body = export_login_history_csv(result.records, policy.can_view_raw_ip(actor.role))
    filename = export_filename(LOGIN_HISTORY_EXPORT_PREFIX, filters.date_from, filters.date_to)
    return _csv_response(body, filename)


@router.get("/alerts")
async def list_security_alerts(
    branch_id: Optional[str] = None,
    severity: Optional[AlertSeverity] = None,
    actor: Annotated[Actor, Depends(get_current_actor)] = ...,
    reader: Annotated[AuditReader, Depends(get_audit_reader)] = ...,
    settings: Annotated[AppSettings, Depends(get_settings)] = ...,
):
    """Alerts derived from the most recent window of activity in the caller's scope."""
    if not settings.enable_security_alerts:
        return {"enabled": False, "alerts": []}
    today = _today()
    filters = AuditFilters(
        date_from=today - timedelta(days=settings.security_alert_window_days),
        date_to=today,
        branch_id=branch_id or None,
        page_size=settings.audit_max_page_size,
    )
    entries = await reader.scan_activity(actor, filters, base_actions=ALERT_ACTIONS)
    alerts = derive_security_alerts(entries, settings.large_expense_threshold, severity)
    logger.info(
        "security_alerts_derived",
        extra={"scanned": len(entries), "alerts": len(alerts)},
    )
    return {"enabled": True, "alerts": [a.to_dict() for a in alerts]}
