"""Summary renderer: registry lookup and lenient placeholder substitution."""

import pytest

from app.governance.summary_renderer import (
    SummaryTemplateRegistry,
    render_summary,
    substitute,
)


def test_known_key_with_params():
    text = render_summary("audit.expense.created", {"amount": 250, "category": "Rent"})
    assert text == "Expense created: 250 (Rent)"


def test_missing_param_left_verbatim():
    text = render_summary("audit.expense.created", {"amount": 250})
    assert text == "Expense created: 250 ({category})"


def test_unknown_key_renders_as_template():
    assert render_summary("Deleted {name}", {"name": "Ana"}) == "Deleted Ana"
    assert render_summary("no.such.key", None) == "no.such.key"


def test_extra_params_ignored():
    assert substitute("Hello {name}", {"name": "Bo", "unused": 1}) == "Hello Bo"


def test_non_mapping_params_returns_template():
    assert substitute("Hello {name}", ["Bo"]) == "Hello {name}"


def test_custom_registry():
    registry = SummaryTemplateRegistry()
    registry.register("audit.stock.updated", "Stock for {item} is now {qty}")
    assert render_summary("audit.stock.updated", {"item": "Belt", "qty": 3}, registry) == "Stock for Belt is now 3"
    assert registry.get("audit.expense.created") is None


def test_register_rejects_empty_key():
    with pytest.raises(ValueError):
        SummaryTemplateRegistry().register(" ", "x")


def test_raw_template_with_two_placeholders():
    assert render_summary("{name} paid {amount}", {"name": "Ali", "amount": 50}) == "Ali paid 50"
    assert render_summary("{name} paid {fee}", {"name": "Ali"}) == "Ali paid {fee}"
