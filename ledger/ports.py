"""Collaborators the ledger reads from but does not implement.

A real deployment backs these with a hosted database and its auth service;
``ledger.seed`` provides file-backed stand-ins for the dashboard and tests.
"""

from typing import Optional, Protocol, Tuple

from ledger.domain import Budget, Expense, SavingsGoal


class PersistenceService(Protocol):
    """Record store scoped by owner. Writes are last-write-wins.

    Callers apply the matching ``ledger.snapshot`` reducer first and forward
    the record only when the reducer accepted it, so the store never sees an
    invalid record.
    """

    def list_expenses(self, owner_id: str) -> Tuple[Expense, ...]: ...

    def list_budgets(self, owner_id: str) -> Tuple[Budget, ...]: ...

    def list_goals(self, owner_id: str) -> Tuple[SavingsGoal, ...]: ...

    def save_expense(self, e: Expense) -> None: ...

    def delete_expense(self, expense_id: str) -> None: ...

    def save_budget(self, b: Budget) -> None: ...

    def save_goal(self, g: SavingsGoal) -> None: ...

    def delete_goal(self, goal_id: str) -> None: ...


class SessionProvider(Protocol):

    def current_owner(self) -> Optional[str]: ...
