from app.governance.snapshots import changed_fields


def test_changed_fields_detects_value_change_and_added_removed_keys():
    before = {"amount": 100, "category": "Rent", "note": "x"}
    after = {"amount": 150, "category": "Rent", "paid": True}
    assert changed_fields(before, after) == ["amount", "note", "paid"]


def test_nested_documents_compared_by_value():
    before = {"meta": {"a": 1, "b": 2}}
    after = {"meta": {"b": 2, "a": 1}}
    assert changed_fields(before, after) == []


def test_one_sided_snapshots_have_no_changes():
    assert changed_fields(None, {"a": 1}) == []
    assert changed_fields({"a": 1}, None) == []
    assert changed_fields([1], [2]) == []
