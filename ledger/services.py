from datetime import date, datetime
from typing import Any, Callable, Dict, Sequence, Tuple, Union

from ledger.aggregation import monthly_summary
from ledger.domain import Budget, Expense
from ledger.insights import (
    average_monthly_spending,
    highest_spending_month,
    lowest_spending_month,
    order_goals,
    time_remaining,
    top_categories,
)
from ledger.logger import get_logger
from ledger.months import current_month
from ledger.progress import (
    budget_progress,
    budget_remaining,
    category_breakdown,
    is_over_budget,
    progress_level,
    savings_progress,
)
from ledger.rolling import SUMMARY_MONTHS, rolling_summary
from ledger.snapshot import LedgerSnapshot, current_budget

logger = get_logger(__name__)

BudgetCalculator = Callable[[Budget, Tuple[Expense, ...]], Dict[str, Any]]


def totals_step(budget: Budget, expenses: Tuple[Expense, ...]) -> Dict[str, Any]:
    summary = monthly_summary(expenses, budget.month)
    return {"spent": summary.total, "per_category": summary.per_category}


def progress_step(budget: Budget, expenses: Tuple[Expense, ...]) -> Dict[str, Any]:
    progress = budget_progress(budget, expenses)
    return {
        "total_limit": budget.total_limit,
        "progress": progress,
        "level": progress_level(progress),
        "remaining": budget_remaining(budget, expenses),
        "over_budget": is_over_budget(budget, expenses),
    }


def breakdown_step(budget: Budget, expenses: Tuple[Expense, ...]) -> Dict[str, Any]:
    return {"categories": category_breakdown(budget, expenses)}


DEFAULT_CALCULATORS: Tuple[BudgetCalculator, ...] = (totals_step, progress_step, breakdown_step)


class BudgetService:
    """Runs budget calculators for one month and merges their outputs into a report.

    calculators: functions taking (budget, expenses) -> dict (partial results)
    """

    def __init__(self, calculators: Sequence[BudgetCalculator] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def monthly_report(self, snapshot: LedgerSnapshot, month: str) -> Dict[str, Any]:
        budget = current_budget(snapshot.budgets, month, snapshot.owner_id or "")
        report: Dict[str, Any] = {"month": month, "has_budget": budget.total_limit > 0, "steps": []}
        result: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(budget, snapshot.expenses)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            result.update(out)
        report["result"] = result
        logger.debug("Budget report for %s built from %d calculators", month, len(self.calculators))
        return report


class InsightsService:
    """Spending trends and savings overview for the signed-in owner."""

    def __init__(self, months: int = SUMMARY_MONTHS, top_k: int = 5):
        self.months = months
        self.top_k = top_k

    def spending_report(self, snapshot: LedgerSnapshot, now: Union[date, datetime]) -> Dict[str, Any]:
        summaries = rolling_summary(snapshot.expenses, now, self.months)
        month = current_month(now)
        return {
            "month": month,
            "summaries": summaries,
            "average": average_monthly_spending(summaries),
            "highest": highest_spending_month(summaries),
            "lowest": lowest_spending_month(summaries),
            "top_categories": tuple(top_categories(snapshot.expenses, month, self.top_k)),
        }

    def savings_report(self, snapshot: LedgerSnapshot, today: date) -> Tuple[Dict[str, Any], ...]:
        return tuple(
            {
                "goal": goal,
                "progress": savings_progress(goal),
                "remaining": goal.target_amount - goal.current_amount,
                "time_remaining": time_remaining(goal, today),
            }
            for goal in order_goals(snapshot.goals)
        )
