from datetime import date, datetime
from decimal import Decimal

from ledger.aggregation import (
    by_search,
    category_spent,
    expenses_by_category,
    filter_expenses,
    filter_expenses_by_month,
    monthly_summary,
    monthly_total,
    sum_amounts,
)
from ledger.domain import Category, Expense


def make_expense(id, amount, category, day, description=""):
    return Expense(
        id=id,
        amount=Decimal(str(amount)),
        description=description,
        category=Category(category),
        date=date.fromisoformat(day),
        created_at=datetime.fromisoformat(f"{day}T12:00:00"),
        owner_id="u1",
    )


def june_expenses():
    return (
        make_expense("e1", 100, "food", "2024-06-01", "Groceries"),
        make_expense("e2", 50, "food", "2024-06-15", "Restaurant"),
        make_expense("e3", 30, "housing", "2024-06-02", "Repairs"),
        make_expense("e4", 999, "housing", "2024-07-01", "Rent"),
    )


def test_monthly_total_scenario():
    assert monthly_total(june_expenses(), "2024-06") == Decimal(180)


def test_expenses_by_category_scenario():
    totals = expenses_by_category(june_expenses(), "2024-06")
    assert dict(totals) == {Category.FOOD: Decimal(150), Category.HOUSING: Decimal(30)}
    assert Category.UTILITIES not in totals
    assert totals.amount(Category.UTILITIES) == 0


def test_filter_by_month_matches_total():
    expenses = june_expenses()
    for month in ("2024-06", "2024-07", "2024-08"):
        subset = filter_expenses_by_month(expenses, month)
        assert sum_amounts(subset) == monthly_total(expenses, month)
        assert expenses_by_category(expenses, month).total() == monthly_total(expenses, month)


def test_month_boundaries():
    expenses = (
        make_expense("e1", 10, "other", "2024-05-31"),
        make_expense("e2", 20, "other", "2024-06-30"),
        make_expense("e3", 40, "other", "2024-07-01"),
    )
    assert [e.id for e in filter_expenses_by_month(expenses, "2024-06")] == ["e2"]


def test_empty_and_malformed_months_give_zero():
    assert monthly_total((), "2024-06") == 0
    assert len(expenses_by_category((), "2024-06")) == 0
    assert filter_expenses_by_month(june_expenses(), "2024") == ()
    assert filter_expenses_by_month(june_expenses(), "2024-13") == ()


def test_order_does_not_matter():
    expenses = june_expenses()
    assert monthly_summary(expenses, "2024-06") == monthly_summary(tuple(reversed(expenses)), "2024-06")


def test_repeated_calls_return_same_result():
    expenses = june_expenses()
    first = monthly_summary(expenses, "2024-06")
    second = monthly_summary(expenses, "2024-06")
    assert first == second
    assert first.total == Decimal(180)
    assert first.month == "2024-06"


def test_category_spent():
    assert category_spent(june_expenses(), "2024-06", Category.FOOD) == Decimal(150)
    assert category_spent(june_expenses(), "2024-06", Category.DEBT) == 0


def test_by_search_is_case_insensitive():
    result = list(filter(by_search("GROC"), june_expenses()))
    assert [e.id for e in result] == ["e1"]


def test_filter_expenses_sorting():
    expenses = june_expenses()
    by_date = filter_expenses(expenses, month="2024-06")
    assert [e.id for e in by_date] == ["e2", "e3", "e1"]

    by_amount = filter_expenses(expenses, month="2024-06", sort_by="amount", descending=False)
    assert [e.id for e in by_amount] == ["e3", "e2", "e1"]


def test_filter_expenses_combines_filters():
    result = filter_expenses(june_expenses(), month="2024-06", search="r", category=Category.FOOD)
    assert [e.id for e in result] == ["e2", "e1"]
