from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from erp.budget import BudgetSummary, summarize
from erp.errors import DataIntegrityError


def item(amount, type_):
    return SimpleNamespace(id=None, amount=Decimal(amount), type=type_)


def test_empty_input_is_zero():
    summary = summarize([])
    assert summary == BudgetSummary.zero()
    assert summary.to_dict() == {"allocated": "0.00", "spent": "0.00"}


def test_income_goes_to_allocated_expense_to_spent():
    assert summarize([item("400", "income")]) == BudgetSummary(Decimal("400.00"), Decimal("0.00"))
    assert summarize([item("150", "expense")]) == BudgetSummary(Decimal("0.00"), Decimal("150.00"))


def test_cents_do_not_drift():
    summary = summarize([item("10.10", "income"), item("20.20", "income")])
    assert summary.allocated == Decimal("30.30")
    assert summary.to_dict()["allocated"] == "30.30"


def test_float_amounts_are_read_through_str():
    items = [SimpleNamespace(id=1, amount=0.1, type="expense"), SimpleNamespace(id=2, amount=0.2, type="expense")]
    assert summarize(items).spent == Decimal("0.30")


def test_order_does_not_matter():
    items = [item("1.05", "income"), item("2.10", "expense"), item("3.33", "income"), item("0.01", "expense")]
    assert summarize(items) == summarize(list(reversed(items)))


def test_concatenation_is_additive():
    a = [item("100.25", "income"), item("40.00", "expense")]
    b = [item("0.75", "income"), item("9.99", "expense"), item("5.01", "expense")]

    assert summarize(a + b) == summarize(a) + summarize(b)
    assert summarize(a + b) == BudgetSummary(Decimal("101.00"), Decimal("55.00"))


def test_unknown_type_fails_loudly():
    with pytest.raises(DataIntegrityError):
        summarize([item("10", "income"), item("5", "refund")])
