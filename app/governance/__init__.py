"""Governance: audit trail writer, reader, context parsing, rendering and export. No FastAPI."""

from app.governance.audit_logger import AuditLogger, record_audit_safely
from app.governance.audit_models import AuditLogEntry, AuditPage, AuditQuery, AuditRecord, DeviceInfo
from app.governance.audit_reader import AuditReader
from app.governance.device_context import parse_request_context, parse_user_agent, resolve_client_ip
from app.governance.ip_privacy import mask_ip
from app.governance.summary_renderer import SummaryTemplateRegistry, render_summary

__all__ = [
    "AuditLogEntry",
    "AuditLogger",
    "AuditPage",
    "AuditQuery",
    "AuditReader",
    "AuditRecord",
    "DeviceInfo",
    "SummaryTemplateRegistry",
    "mask_ip",
    "parse_request_context",
    "parse_user_agent",
    "record_audit_safely",
    "render_summary",
    "resolve_client_ip",
]
