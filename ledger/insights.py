from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from ledger.aggregation import expenses_by_category
from ledger.domain import Category, Expense, MonthlyTotal, SavingsGoal
from ledger.progress import is_goal_completed, percentage


def average_monthly_spending(summaries: Sequence[MonthlyTotal]) -> Decimal:
    if not summaries:
        return Decimal(0)
    return sum((m.total for m in summaries), Decimal(0)) / len(summaries)


def highest_spending_month(summaries: Sequence[MonthlyTotal]) -> Optional[MonthlyTotal]:
    if not summaries:
        return None
    return max(summaries, key=lambda m: m.total)


def lowest_spending_month(summaries: Sequence[MonthlyTotal]) -> Optional[MonthlyTotal]:
    # Months with no spending are left out, so this is the lowest non-zero month.
    spending = [m for m in summaries if m.total > 0]
    if not spending:
        return None
    return min(spending, key=lambda m: m.total)


def top_categories(
    expenses: Iterable[Expense], month: str, k: int = 5
) -> Iterator[Tuple[Category, Decimal, float]]:
    """Yield (category, amount, share of the month's spend in %) by amount, largest first."""
    totals = expenses_by_category(expenses, month)
    month_total = totals.total()

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    for category, amount in ordered[: max(0, k)]:
        yield category, amount, percentage(amount, month_total)


def order_goals(goals: Iterable[SavingsGoal]) -> Tuple[SavingsGoal, ...]:
    """Unfinished goals first, each group by nearest target date."""
    return tuple(sorted(goals, key=lambda g: (is_goal_completed(g), g.target_date)))


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} remaining"


def time_remaining(goal: SavingsGoal, today: date) -> str:
    days = (goal.target_date - today).days
    if days < 0:
        return "Goal date passed"
    if days == 0:
        return "Due today"
    if days == 1:
        return "1 day remaining"
    if days < 30:
        return f"{days} days remaining"
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")
