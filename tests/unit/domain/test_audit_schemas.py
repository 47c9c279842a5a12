"""Write request schema: camelCase wire format and identifier coercion."""

import pytest
from pydantic import ValidationError

from app.domain.models.audit import AuditAction
from app.domain.schemas.audit import AuditLogCreateRequest


def test_camel_case_body_maps_to_payload():
    body = AuditLogCreateRequest.model_validate(
        {
            "action": "update",
            "entityType": "student",
            "entityId": 42,
            "summaryKey": "audit.student.updated",
            "summaryParams": {"name": "Ana"},
            "beforeData": {"belt": "white"},
            "afterData": {"belt": "yellow"},
            "branchId": "b-1",
        }
    )
    payload = body.to_payload()
    assert payload.action is AuditAction.UPDATE
    assert payload.entity_id == "42"
    assert payload.branch_id == "b-1"
    assert payload.before_data == {"belt": "white"}


def test_empty_identifiers_mean_absent():
    body = AuditLogCreateRequest.model_validate(
        {"action": "create", "entityType": "expense", "summaryKey": "k", "entityId": "", "branchId": ""}
    )
    assert body.entity_id is None
    assert body.branch_id is None


def test_unknown_action_rejected():
    with pytest.raises(ValidationError):
        AuditLogCreateRequest.model_validate({"action": "archive", "entityType": "x", "summaryKey": "k"})


def test_missing_entity_type_rejected():
    with pytest.raises(ValidationError):
        AuditLogCreateRequest.model_validate({"action": "create", "summaryKey": "k"})
