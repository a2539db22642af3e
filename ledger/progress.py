"""Percentage metrics for budgets and savings goals.

Every ratio is ``actual / target * 100`` and is 0 when the target is 0. Results
are never clamped: a value above 100 means the budget was exceeded, and it is
up to the caller to cap it for a progress bar.
"""

from decimal import Decimal
from typing import Iterable, Tuple

from ledger.aggregation import category_spent, expenses_by_category, monthly_total
from ledger.domain import Budget, Category, Expense, SavingsGoal
from ledger.formatting import format_currency
from ledger.functional import Either, Left, Right
from ledger.taxonomy import categories

WARNING_THRESHOLD = 70.0
OVER_THRESHOLD = 90.0


def percentage(actual: Decimal, target: Decimal) -> float:
    if target <= 0:
        return 0.0
    return float(actual / target * 100)


def budget_progress(budget: Budget, expenses: Iterable[Expense]) -> float:
    return percentage(monthly_total(expenses, budget.month), budget.total_limit)


def category_budget_progress(budget: Budget, expenses: Iterable[Expense], category: Category) -> float:
    limit = budget.category_limits.amount(category)
    return percentage(category_spent(expenses, budget.month, category), limit)


def savings_progress(goal: SavingsGoal) -> float:
    return percentage(goal.current_amount, goal.target_amount)


def fund_goal(goal: SavingsGoal, amount: Decimal) -> Either[dict, SavingsGoal]:
    """Add ``amount`` to a goal's saved total.

    This is the only operation that changes ``current_amount``; it refuses any
    increment that would take the goal past its target.
    """
    if amount <= 0:
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount",
            "goal_id": goal.id,
            "amount": amount,
        })

    remaining = goal.target_amount - goal.current_amount
    if goal.current_amount + amount > goal.target_amount:
        return Left({
            "error": "exceeds_target",
            "message": f"Amount exceeds remaining goal of {format_currency(remaining)}",
            "goal_id": goal.id,
            "amount": amount,
            "remaining": remaining,
        })

    return Right(SavingsGoal(
        id=goal.id,
        name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount + amount,
        start_date=goal.start_date,
        target_date=goal.target_date,
        owner_id=goal.owner_id,
        category=goal.category,
    ))


def is_goal_completed(goal: SavingsGoal) -> bool:
    return savings_progress(goal) >= 100


def budget_remaining(budget: Budget, expenses: Iterable[Expense]) -> Decimal:
    return budget.total_limit - monthly_total(expenses, budget.month)


def is_over_budget(budget: Budget, expenses: Iterable[Expense]) -> bool:
    return budget.total_limit > 0 and budget_remaining(budget, expenses) < 0


def progress_level(progress: float) -> str:
    """Bucket a percentage into "ok", "warning" or "over" for colouring."""
    if progress <= WARNING_THRESHOLD:
        return "ok"
    if progress <= OVER_THRESHOLD:
        return "warning"
    return "over"


def active_categories(budget: Budget, expenses: Iterable[Expense]) -> Tuple[Category, ...]:
    spent = expenses_by_category(expenses, budget.month)
    return tuple(c for c in categories() if c in budget.category_limits or c in spent)


def category_breakdown(budget: Budget, expenses: Iterable[Expense]) -> Tuple[dict, ...]:
    """One row per active category with its spend, limit and progress.

    A category that has spending but no limit reports 100.
    """
    expenses = tuple(expenses)
    spent_by_category = expenses_by_category(expenses, budget.month)
    rows = []
    for category in active_categories(budget, expenses):
        limit = budget.category_limits.amount(category)
        spent = spent_by_category.amount(category)
        if limit > 0:
            progress = percentage(spent, limit)
        else:
            progress = 100.0 if spent > 0 else 0.0
        rows.append({
            "category": category,
            "spent": spent,
            "limit": limit,
            "progress": progress,
        })
    return tuple(rows)
