from datetime import date, datetime
from decimal import Decimal

import pytest

from ledger.domain import Budget, Category, CategoryAmounts, Expense


def test_category_amounts_absent_key_is_zero():
    amounts = CategoryAmounts({Category.FOOD: Decimal("12.5")})
    assert amounts[Category.FOOD] == Decimal("12.5")
    assert amounts.amount(Category.HOUSING) == 0
    assert Category.HOUSING not in amounts
    with pytest.raises(KeyError):
        amounts[Category.HOUSING]


def test_category_amounts_accepts_raw_identifiers():
    amounts = CategoryAmounts({"food": "10", "debt": 5})
    assert amounts == {Category.FOOD: Decimal(10), Category.DEBT: Decimal(5)}
    assert amounts.total() == Decimal(15)


def test_category_amounts_is_hashable_and_comparable():
    a = CategoryAmounts({Category.FOOD: Decimal(1)})
    b = CategoryAmounts([(Category.FOOD, Decimal(1))])
    assert a == b
    assert hash(a) == hash(b)
    assert CategoryAmounts() == {}


def test_records_are_frozen():
    e = Expense("e1", Decimal(5), "Tea", Category.FOOD, date(2024, 2, 29), datetime(2024, 2, 29), "u1")
    assert e.month == "2024-02"
    with pytest.raises(AttributeError):
        e.amount = Decimal(6)


def test_budget_defaults_to_no_limits():
    b = Budget("b1", "2024-01", Decimal(100), "u1")
    assert len(b.category_limits) == 0
    assert hash(b) == hash(Budget("b1", "2024-01", Decimal(100), "u1"))
