"""Immutable view of one owner's records.

The application holds a ``LedgerSnapshot`` and replaces it with the result of
each reducer below after the persistence layer confirms a write. Every
calculator in the package takes its inputs from a snapshot; none of them keep
state of their own.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Tuple

from ledger.domain import Budget, Expense, SavingsGoal
from ledger.functional import (
    Either,
    Left,
    Right,
    validate_budget,
    validate_expense,
    validate_savings_goal,
)
from ledger.logger import get_logger
from ledger.progress import fund_goal

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    owner_id: Optional[str] = None
    expenses: Tuple[Expense, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    goals: Tuple[SavingsGoal, ...] = ()


def scope_to_owner(snapshot: LedgerSnapshot, owner_id: Optional[str]) -> LedgerSnapshot:
    """Keep only the records of ``owner_id``; nobody signed in means no records."""
    if owner_id is None:
        return LedgerSnapshot()
    return LedgerSnapshot(
        owner_id=owner_id,
        expenses=tuple(e for e in snapshot.expenses if e.owner_id == owner_id),
        budgets=tuple(b for b in snapshot.budgets if b.owner_id == owner_id),
        goals=tuple(g for g in snapshot.goals if g.owner_id == owner_id),
    )


def add_expense(snapshot: LedgerSnapshot, e: Expense) -> Either[dict, LedgerSnapshot]:
    return validate_expense(e).map(
        lambda valid: replace(snapshot, expenses=snapshot.expenses + (valid,))
    )


def update_expense(snapshot: LedgerSnapshot, e: Expense) -> Either[dict, LedgerSnapshot]:
    return validate_expense(e).map(
        lambda valid: replace(
            snapshot,
            expenses=tuple(valid if old.id == valid.id else old for old in snapshot.expenses),
        )
    )


def delete_expense(snapshot: LedgerSnapshot, expense_id: str) -> LedgerSnapshot:
    logger.debug("Removing expense %s", expense_id)
    return replace(snapshot, expenses=tuple(e for e in snapshot.expenses if e.id != expense_id))


def current_budget(budgets: Tuple[Budget, ...], month: str, owner_id: str = "") -> Budget:
    """The budget for ``month``, or an empty one (no limits) if none was set.

    The empty budget's id is derived from owner and month, so repeated calls agree.
    """
    for b in budgets:
        if b.month == month:
            return b
    return Budget(id=f"{owner_id}:{month}", month=month, total_limit=Decimal(0), owner_id=owner_id)


def upsert_budget(snapshot: LedgerSnapshot, b: Budget) -> Either[dict, LedgerSnapshot]:
    """Store ``b`` as the budget of its (owner, month); a later write replaces an earlier one."""
    def _apply(valid: Budget) -> LedgerSnapshot:
        others = tuple(
            old for old in snapshot.budgets
            if not (old.owner_id == valid.owner_id and old.month == valid.month)
        )
        if len(others) < len(snapshot.budgets):
            logger.debug("Replacing budget for %s", valid.month)
        return replace(snapshot, budgets=others + (valid,))

    return validate_budget(b).map(_apply)


def add_goal(snapshot: LedgerSnapshot, g: SavingsGoal) -> Either[dict, LedgerSnapshot]:
    return validate_savings_goal(g).map(
        lambda valid: replace(snapshot, goals=snapshot.goals + (valid,))
    )


def _find_goal(snapshot: LedgerSnapshot, goal_id: str) -> Either[dict, SavingsGoal]:
    goal = next((g for g in snapshot.goals if g.id == goal_id), None)
    if goal is None:
        return Left({
            "error": "goal_not_found",
            "message": f"Savings goal with ID {goal_id} does not exist",
            "goal_id": goal_id,
        })
    return Right(goal)


def _replace_goal(snapshot: LedgerSnapshot, goal: SavingsGoal) -> LedgerSnapshot:
    return replace(snapshot, goals=tuple(goal if g.id == goal.id else g for g in snapshot.goals))


def update_goal(snapshot: LedgerSnapshot, g: SavingsGoal) -> Either[dict, LedgerSnapshot]:
    """Edit a goal's details. The saved amount is kept; only ``fund`` changes it."""
    return (
        _find_goal(snapshot, g.id)
        .map(lambda old: replace(g, current_amount=old.current_amount))
        .bind(validate_savings_goal)
        .map(lambda valid: _replace_goal(snapshot, valid))
    )


def delete_goal(snapshot: LedgerSnapshot, goal_id: str) -> LedgerSnapshot:
    logger.debug("Removing savings goal %s", goal_id)
    return replace(snapshot, goals=tuple(g for g in snapshot.goals if g.id != goal_id))


def fund(snapshot: LedgerSnapshot, goal_id: str, amount: Decimal) -> Either[dict, LedgerSnapshot]:
    result = _find_goal(snapshot, goal_id).bind(lambda goal: fund_goal(goal, amount))
    if result.is_left():
        logger.info("Funding rejected for goal %s: %s", goal_id, result.get_error()["error"])
        return result
    return result.map(lambda funded: _replace_goal(snapshot, funded))
