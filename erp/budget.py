"""
erp/budget.py

Budget aggregation for a project.

allocated = sum of income items, spent = sum of expense items.

All arithmetic is Decimal (never float) so 10.10 + 20.20 == 30.30 exactly.
The reduction is order independent: summaries of partitions can be merged
with `+`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from .errors import DataIntegrityError

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert Numeric/None/str to Decimal safely (floats go through str)."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(x: Decimal) -> Decimal:
    return x.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BudgetSummary:
    allocated: Decimal
    spent: Decimal

    @classmethod
    def zero(cls) -> "BudgetSummary":
        return cls(allocated=Decimal("0.00"), spent=Decimal("0.00"))

    def __add__(self, other: "BudgetSummary") -> "BudgetSummary":
        if not isinstance(other, BudgetSummary):
            return NotImplemented
        return BudgetSummary(
            allocated=money(self.allocated + other.allocated),
            spent=money(self.spent + other.spent),
        )

    def to_dict(self) -> dict:
        return {"allocated": f"{self.allocated:.2f}", "spent": f"{self.spent:.2f}"}


def summarize(items: Iterable) -> BudgetSummary:
    """
    Reduce budget items (anything with .type and .amount) to a BudgetSummary.

    Raises DataIntegrityError for a type other than income/expense.
    """
    allocated = Decimal("0.00")
    spent = Decimal("0.00")

    for item in items:
        amount = to_decimal(item.amount)
        if item.type == "income":
            allocated += amount
        elif item.type == "expense":
            spent += amount
        else:
            raise DataIntegrityError(
                f"Budget item {getattr(item, 'id', None)!r} has unknown type {item.type!r}"
            )

    return BudgetSummary(allocated=money(allocated), spent=money(spent))
