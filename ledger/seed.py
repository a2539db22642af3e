import json
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, TypeVar, Union

from ledger.domain import Budget, Category, CategoryAmounts, Expense, SavingsGoal
from ledger.functional import (
    Either,
    Left,
    Right,
    safe_category,
    to_decimal,
    validate_budget,
    validate_expense,
    validate_savings_goal,
)
from ledger.logger import get_logger
from ledger.ports import PersistenceService, SessionProvider
from ledger.snapshot import LedgerSnapshot, scope_to_owner

logger = get_logger(__name__)

R = TypeVar('R')


def _category(raw: str) -> Category:
    parsed = safe_category(raw)
    if parsed.is_none():
        raise ValueError(f"unknown category {raw!r}")
    return parsed.get_or_else(Category.OTHER)


def _amount(raw) -> Decimal:
    parsed = to_decimal(raw)
    if parsed.is_left():
        raise ValueError(f"{parsed.get_error()['message']}: {raw!r}")
    return parsed.get_or_else(Decimal(0))


def parse_expense(d: dict) -> Expense:
    return Expense(
        id=d["id"],
        amount=_amount(d["amount"]),
        description=d.get("description", ""),
        category=_category(d["category"]),
        date=date.fromisoformat(d["date"]),
        created_at=datetime.fromisoformat(d.get("created_at") or f"{d['date']}T00:00:00"),
        owner_id=d["owner_id"],
    )


def parse_budget(d: dict) -> Budget:
    limits = {_category(k): _amount(v) for k, v in (d.get("category_limits") or {}).items()}
    return Budget(
        id=d["id"],
        month=d["month"],
        total_limit=_amount(d["total_limit"]),
        owner_id=d["owner_id"],
        category_limits=CategoryAmounts(limits),
    )


def parse_goal(d: dict) -> SavingsGoal:
    return SavingsGoal(
        id=d["id"],
        name=d["name"],
        target_amount=_amount(d["target_amount"]),
        current_amount=_amount(d.get("current_amount", 0)),
        start_date=date.fromisoformat(d["start_date"]),
        target_date=date.fromisoformat(d["target_date"]),
        owner_id=d["owner_id"],
        category=d.get("category"),
    )


def _load_records(
    kind: str,
    rows: Iterable[dict],
    parse: Callable[[dict], R],
    validate: Callable[[R], Either[dict, R]],
) -> Either[dict, Tuple[R, ...]]:
    records = []
    for index, row in enumerate(rows):
        try:
            record = parse(row)
        except (KeyError, TypeError, ValueError) as e:
            return Left({
                "error": "invalid_record",
                "message": f"Could not read {kind} #{index}: {e}",
                "kind": kind,
                "index": index,
            })
        checked = validate(record)
        if checked.is_left():
            return checked
        records.append(record)
    return Right(tuple(records))


def load_seed(path: Union[str, Path]) -> Either[dict, LedgerSnapshot]:
    """Read expenses, budgets and goals for every owner from a JSON file.

    A missing or malformed file raises; a well-formed file with a bad record
    comes back as a ``Left`` naming the record.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    expenses = _load_records("expense", data.get("expenses", []), parse_expense, validate_expense)
    budgets = _load_records("budget", data.get("budgets", []), parse_budget, validate_budget)
    goals = _load_records("goal", data.get("goals", []), parse_goal, validate_savings_goal)

    for part in (expenses, budgets, goals):
        if part.is_left():
            logger.warning("Seed %s rejected: %s", path, part.get_error()["message"])
            return part

    snapshot = LedgerSnapshot(
        expenses=expenses.get_or_else(()),
        budgets=budgets.get_or_else(()),
        goals=goals.get_or_else(()),
    )
    logger.info(
        "Loaded %d expenses, %d budgets, %d goals from %s",
        len(snapshot.expenses), len(snapshot.budgets), len(snapshot.goals), path,
    )
    return Right(snapshot)


def _upsert(records: Tuple[R, ...], record: R) -> Tuple[R, ...]:
    if any(r.id == record.id for r in records):
        return tuple(record if r.id == record.id else r for r in records)
    return records + (record,)


class JsonSeedStore(PersistenceService):
    """Record store seeded from a JSON file, loaded once.

    Writes update the in-memory copy only; the seed file is never rewritten.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        loaded = load_seed(self.path)
        if loaded.is_left():
            raise ValueError(loaded.get_error()["message"])
        self._snapshot = loaded.get_or_else(LedgerSnapshot())

    def list_expenses(self, owner_id: str) -> Tuple[Expense, ...]:
        return scope_to_owner(self._snapshot, owner_id).expenses

    def list_budgets(self, owner_id: str) -> Tuple[Budget, ...]:
        return scope_to_owner(self._snapshot, owner_id).budgets

    def list_goals(self, owner_id: str) -> Tuple[SavingsGoal, ...]:
        return scope_to_owner(self._snapshot, owner_id).goals

    def save_expense(self, e: Expense) -> None:
        self._snapshot = replace(self._snapshot, expenses=_upsert(self._snapshot.expenses, e))

    def delete_expense(self, expense_id: str) -> None:
        self._snapshot = replace(
            self._snapshot,
            expenses=tuple(e for e in self._snapshot.expenses if e.id != expense_id),
        )

    def save_budget(self, b: Budget) -> None:
        others = tuple(
            old for old in self._snapshot.budgets
            if old.id != b.id and not (old.owner_id == b.owner_id and old.month == b.month)
        )
        self._snapshot = replace(self._snapshot, budgets=others + (b,))

    def save_goal(self, g: SavingsGoal) -> None:
        self._snapshot = replace(self._snapshot, goals=_upsert(self._snapshot.goals, g))

    def delete_goal(self, goal_id: str) -> None:
        self._snapshot = replace(
            self._snapshot,
            goals=tuple(g for g in self._snapshot.goals if g.id != goal_id),
        )
        logger.debug("Store dropped savings goal %s", goal_id)


class StaticSession(SessionProvider):

    def __init__(self, owner_id: Optional[str]):
        self._owner_id = owner_id

    def current_owner(self) -> Optional[str]:
        return self._owner_id


def open_snapshot(store: PersistenceService, session: SessionProvider) -> LedgerSnapshot:
    """Fetch the signed-in owner's records as a snapshot; empty when signed out."""
    owner_id = session.current_owner()
    if owner_id is None:
        return LedgerSnapshot()
    return LedgerSnapshot(
        owner_id=owner_id,
        expenses=store.list_expenses(owner_id),
        budgets=store.list_budgets(owner_id),
        goals=store.list_goals(owner_id),
    )
