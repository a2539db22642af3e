from decimal import Decimal
from functools import reduce
from typing import Callable, Iterable, Optional, Tuple

from ledger.domain import Category, CategoryAmounts, Expense, MonthlyTotal
from ledger.months import is_month_key

Predicate = Callable[[Expense], bool]


def by_month(month: str) -> Predicate:
    def _filter(e: Expense) -> bool:
        return e.month == month

    return _filter


def by_category(category: Category) -> Predicate:
    def _filter(e: Expense) -> bool:
        return e.category is category

    return _filter


def by_search(term: str) -> Predicate:
    needle = term.lower()

    def _filter(e: Expense) -> bool:
        return needle in e.description.lower()

    return _filter


def filter_expenses_by_month(expenses: Iterable[Expense], month: str) -> Tuple[Expense, ...]:
    if not is_month_key(month):
        return ()
    return tuple(filter(by_month(month), expenses))


def sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return reduce(lambda acc, e: acc + e.amount, expenses, Decimal(0))


def monthly_total(expenses: Iterable[Expense], month: str) -> Decimal:
    return sum_amounts(filter_expenses_by_month(expenses, month))


def _totals_by_category(expenses: Iterable[Expense]) -> CategoryAmounts:
    totals: dict[Category, Decimal] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, Decimal(0)) + e.amount
    return CategoryAmounts(totals)


def expenses_by_category(expenses: Iterable[Expense], month: str) -> CategoryAmounts:
    return _totals_by_category(filter_expenses_by_month(expenses, month))


def category_spent(expenses: Iterable[Expense], month: str, category: Category) -> Decimal:
    return sum_amounts(filter(by_category(category), filter_expenses_by_month(expenses, month)))


def monthly_summary(expenses: Iterable[Expense], month: str) -> MonthlyTotal:
    in_month = filter_expenses_by_month(expenses, month)
    return MonthlyTotal(
        month=month,
        total=sum_amounts(in_month),
        per_category=_totals_by_category(in_month),
    )


def filter_expenses(
    expenses: Iterable[Expense],
    month: Optional[str] = None,
    search: str = "",
    category: Optional[Category] = None,
    sort_by: str = "date",
    descending: bool = True,
) -> Tuple[Expense, ...]:
    """Expense list view: month, description search and category filters, then sort.

    sort_by is "date" or "amount".
    """
    predicates: list[Predicate] = []
    if month is not None:
        predicates.append(by_month(month))
    if search:
        predicates.append(by_search(search))
    if category is not None:
        predicates.append(by_category(category))

    selected = [e for e in expenses if all(p(e) for p in predicates)]
    if sort_by == "amount":
        key = lambda e: e.amount
    elif sort_by == "date":
        key = lambda e: e.date
    else:
        raise ValueError(f"Unknown sort field: {sort_by!r}")
    return tuple(sorted(selected, key=key, reverse=descending))
