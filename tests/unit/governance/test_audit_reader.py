"""Audit reader: role scoping, filter translation, validation, redaction."""

from datetime import date, datetime, timezone

import pytest

from app.domain.exceptions import DomainValidationError, InvalidDateRangeError
from app.domain.models.audit import AUTH_ACTIONS, Actor, AuditAction, AuditFilters
from app.governance.audit_reader import AuditReader
from app.governance.exceptions import AuditRecordNotFoundError
from app.security.exceptions import ForbiddenError

DAY = date(2024, 5, 1)

ADMIN = Actor(user_id="u-0", role="super_admin", full_name="Root")
MANAGER = Actor(user_id="u-1", role="branch_manager", branch_id="b-1", full_name="Maya")


@pytest.fixture
def reader(fake_repository):
    return AuditReader(repository=fake_repository, max_page_size=100)


def _filters(**overrides):
    data = dict(date_from=DAY, date_to=DAY)
    data.update(overrides)
    return AuditFilters(**data)


async def test_manager_cannot_widen_branch_scope(reader, fake_repository):
    await reader.list_activity(MANAGER, _filters(branch_id="b-2"))
    assert fake_repository.queries[-1].branch_id == "b-1"


async def test_admin_scope_follows_request(reader, fake_repository):
    await reader.list_activity(ADMIN, _filters())
    assert fake_repository.queries[-1].branch_id is None
    await reader.list_activity(ADMIN, _filters(branch_id="b-2"))
    assert fake_repository.queries[-1].branch_id == "b-2"


async def test_unknown_role_forbidden(reader, fake_repository):
    with pytest.raises(ForbiddenError):
        await reader.list_activity(Actor(user_id="u-9", role="instructor"), _filters())
    assert fake_repository.queries == []


async def test_manager_without_branch_forbidden(reader):
    with pytest.raises(ForbiddenError):
        await reader.list_activity(Actor(user_id="u-2", role="branch_manager"), _filters())


async def test_day_bounds_are_inclusive(reader, fake_repository):
    await reader.list_activity(ADMIN, _filters(date_to=date(2024, 5, 3)))
    q = fake_repository.queries[-1]
    assert q.created_from == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert q.created_before == datetime(2024, 5, 4, tzinfo=timezone.utc)


async def test_sensitive_only_restricts_to_delete_and_reset(reader, fake_repository, make_entry):
    fake_repository.entries = [
        make_entry(action=AuditAction.CREATE),
        make_entry(action=AuditAction.DELETE),
        make_entry(action=AuditAction.RESET),
    ]
    page = await reader.list_activity(ADMIN, _filters(sensitive_only=True))
    assert page.total_count == 2
    assert {e.record.action for e in page.records} == {AuditAction.DELETE, AuditAction.RESET}


async def test_sensitive_only_intersects_action_filter(reader, fake_repository):
    page = await reader.list_activity(ADMIN, _filters(sensitive_only=True, action=AuditAction.CREATE))
    assert page.total_count == 0
    assert page.records == []
    assert fake_repository.queries == []


async def test_logins_only_return_auth_actions(reader, fake_repository, make_entry):
    fake_repository.entries = [
        make_entry(action=AuditAction.LOGIN, entity_type="auth"),
        make_entry(action=AuditAction.FAILED_LOGIN, entity_type="auth"),
        make_entry(action=AuditAction.UPDATE),
    ]
    page = await reader.list_logins(ADMIN, _filters())
    assert page.total_count == 2
    assert fake_repository.queries[-1].actions == AUTH_ACTIONS


async def test_pagination_is_stable(reader, fake_repository, make_entry):
    fake_repository.entries = [
        make_entry(created_at=datetime(2024, 5, 1, 8, m, tzinfo=timezone.utc)) for m in range(5)
    ]
    first = await reader.list_activity(ADMIN, _filters(page=1, page_size=2))
    second = await reader.list_activity(ADMIN, _filters(page=2, page_size=2))
    assert first.total_count == second.total_count == 5
    first_ids = {e.record.id for e in first.records}
    assert first_ids.isdisjoint(e.record.id for e in second.records)
    assert first.records[0].record.created_at > second.records[0].record.created_at


async def test_inverted_date_range_rejected(reader):
    with pytest.raises(InvalidDateRangeError):
        await reader.list_activity(ADMIN, _filters(date_from=date(2024, 5, 2)))


@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (1, 101)])
async def test_bad_pagination_rejected(reader, page, page_size):
    with pytest.raises(DomainValidationError):
        await reader.list_activity(ADMIN, _filters(page=page, page_size=page_size))


async def test_blank_search_is_ignored(reader, fake_repository):
    await reader.list_activity(ADMIN, _filters(search_term="   "))
    assert fake_repository.queries[-1].search_term is None


async def test_get_entry_out_of_scope_is_not_found(reader, fake_repository, make_entry):
    other = make_entry(branch_id="b-2")
    own = make_entry(branch_id="b-1")
    fake_repository.entries = [other, own]
    shown = await reader.get_entry(MANAGER, own.record.id)
    assert shown.record.id == own.record.id
    assert shown.record.ip_address is None
    assert shown.record.ip_masked == "203.0.*.*"
    with pytest.raises(AuditRecordNotFoundError):
        await reader.get_entry(MANAGER, other.record.id)
    assert (await reader.get_entry(ADMIN, other.record.id)) is other


async def test_get_entry_missing(reader):
    with pytest.raises(AuditRecordNotFoundError):
        await reader.get_entry(ADMIN, "nope")


def test_present_redacts_raw_ip_for_manager(reader, make_entry):
    entry = make_entry()
    shown = reader.present(MANAGER, entry)
    assert "ip_address" not in shown
    assert shown["ip_masked"] == "203.0.*.*"
    assert shown["summary"] == "Student Ana added"
    assert shown["actor_name"] == "Maya"


def test_present_shows_raw_ip_for_admin(reader, make_entry):
    assert reader.present(ADMIN, make_entry())["ip_address"] == "203.0.113.7"


async def test_manager_list_never_carries_raw_ip(reader, fake_repository, make_entry):
    fake_repository.entries = [make_entry(), make_entry(action=AuditAction.LOGIN, entity_type="auth")]
    for page in (
        await reader.list_activity(MANAGER, _filters()),
        await reader.list_logins(MANAGER, _filters()),
    ):
        assert page.records
        assert all(e.record.ip_address is None for e in page.records)
        assert all(e.record.ip_masked == "203.0.*.*" for e in page.records)


async def test_admin_list_keeps_raw_ip(reader, fake_repository, make_entry):
    fake_repository.entries = [make_entry()]
    page = await reader.list_activity(ADMIN, _filters())
    assert page.records[0].record.ip_address == "203.0.113.7"


async def test_scan_activity_walks_every_page(reader, fake_repository, make_entry):
    fake_repository.entries = [
        make_entry(created_at=datetime(2024, 5, 1, 8, m, tzinfo=timezone.utc)) for m in range(7)
    ]
    entries = await reader.scan_activity(ADMIN, _filters(page_size=3))
    assert len(entries) == 7
    assert len({e.record.id for e in entries}) == 7
    assert [q.offset for q in fake_repository.queries] == [0, 3, 6]
    assert entries[0].record.created_at > entries[-1].record.created_at


async def test_scan_activity_honours_base_actions(reader, fake_repository, make_entry):
    fake_repository.entries = [
        make_entry(action=AuditAction.UPDATE),
        make_entry(action=AuditAction.RESET),
    ]
    entries = await reader.scan_activity(ADMIN, _filters(page_size=1), base_actions=frozenset({AuditAction.RESET}))
    assert [e.record.action for e in entries] == [AuditAction.RESET]
