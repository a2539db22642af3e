import json
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from ledger.domain import Budget, Category, CategoryAmounts, Expense, SavingsGoal
from ledger.seed import JsonSeedStore, StaticSession, load_seed, open_snapshot
from ledger.snapshot import fund, upsert_budget

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def write_seed(tmp_path, **sections):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(sections), encoding="utf-8")
    return path


def test_load_seed():
    result = load_seed(SEED)
    assert result.is_right()
    snap = result.get_or_else(None)
    assert len(snap.expenses) >= 10
    assert len(snap.budgets) >= 2
    assert len(snap.goals) >= 2
    assert all(e.amount > 0 for e in snap.expenses)


def test_load_seed_parses_records(tmp_path):
    path = write_seed(
        tmp_path,
        expenses=[{"id": "e1", "amount": "12.30", "description": "Lunch", "category": "food",
                   "date": "2024-06-01", "owner_id": "u1"}],
        budgets=[{"id": "b1", "month": "2024-06", "total_limit": 100,
                  "category_limits": {"food": "40"}, "owner_id": "u1"}],
        goals=[{"id": "g1", "name": "Bike", "target_amount": "300", "start_date": "2024-01-01",
                "target_date": "2024-09-01", "owner_id": "u1"}],
    )
    snap = load_seed(path).get_or_else(None)
    assert snap.expenses[0].amount == Decimal("12.30")
    assert snap.expenses[0].category is Category.FOOD
    assert snap.budgets[0].category_limits.amount(Category.FOOD) == Decimal(40)
    assert snap.goals[0].current_amount == 0
    assert snap.goals[0].category is None


def test_load_seed_reports_unknown_category(tmp_path):
    path = write_seed(tmp_path, expenses=[{"id": "e1", "amount": 5, "category": "pets",
                                           "date": "2024-06-01", "owner_id": "u1"}])
    error = load_seed(path).get_error()
    assert error["error"] == "invalid_record"
    assert error["kind"] == "expense"
    assert "pets" in error["message"]


def test_load_seed_reports_invariant_violation(tmp_path):
    path = write_seed(tmp_path, goals=[{"id": "g1", "name": "Bike", "target_amount": 100,
                                        "current_amount": 150, "start_date": "2024-01-01",
                                        "target_date": "2024-09-01", "owner_id": "u1"}])
    assert load_seed(path).get_error()["error"] == "exceeds_target"


def test_load_seed_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_seed(tmp_path / "nope.json")


def test_open_snapshot_scopes_to_session_owner():
    store = JsonSeedStore(SEED)
    snap = open_snapshot(store, StaticSession("demo-user"))
    assert snap.owner_id == "demo-user"
    assert snap.expenses
    assert all(e.owner_id == "demo-user" for e in snap.expenses)
    assert all(b.owner_id == "demo-user" for b in snap.budgets)


def test_open_snapshot_signed_out_is_empty():
    snap = open_snapshot(JsonSeedStore(SEED), StaticSession(None))
    assert snap.owner_id is None
    assert snap.expenses == () and snap.budgets == () and snap.goals == ()


def test_store_refuses_invalid_seed(tmp_path):
    path = write_seed(tmp_path, budgets=[{"id": "b1", "month": "2024-6", "total_limit": 1, "owner_id": "u1"}])
    with pytest.raises(ValueError):
        JsonSeedStore(path)


def small_store(tmp_path):
    path = write_seed(
        tmp_path,
        expenses=[{"id": "e1", "amount": "20", "category": "food", "date": "2024-06-01", "owner_id": "u1"},
                  {"id": "e2", "amount": "9", "category": "other", "date": "2024-06-02", "owner_id": "u2"}],
        budgets=[{"id": "b1", "month": "2024-06", "total_limit": "100", "owner_id": "u1"}],
        goals=[{"id": "g1", "name": "Bike", "target_amount": "300", "current_amount": "100",
                "start_date": "2024-01-01", "target_date": "2024-09-01", "owner_id": "u1"}],
    )
    return JsonSeedStore(path)


def test_store_saves_new_and_edited_expenses(tmp_path):
    store = small_store(tmp_path)
    store.save_expense(Expense("e3", Decimal(5), "Coffee", Category.FOOD, date(2024, 6, 3),
                               datetime(2024, 6, 3, 8, 0), "u1"))
    edited = replace(store.list_expenses("u1")[0], amount=Decimal(25))
    store.save_expense(edited)
    assert [e.id for e in store.list_expenses("u1")] == ["e1", "e3"]
    assert store.list_expenses("u1")[0].amount == Decimal(25)
    assert [e.id for e in store.list_expenses("u2")] == ["e2"]


def test_store_deletes_expense(tmp_path):
    store = small_store(tmp_path)
    store.delete_expense("e1")
    assert store.list_expenses("u1") == ()
    assert len(store.list_expenses("u2")) == 1


def test_store_keeps_one_budget_per_owner_and_month(tmp_path):
    store = small_store(tmp_path)
    store.save_budget(Budget("b9", "2024-06", Decimal(250), "u1",
                             CategoryAmounts({Category.FOOD: Decimal(80)})))
    store.save_budget(Budget("b10", "2024-06", Decimal(40), "u2"))
    budgets = store.list_budgets("u1")
    assert len(budgets) == 1
    assert budgets[0].id == "b9"
    assert budgets[0].total_limit == Decimal(250)
    assert store.list_budgets("u2")[0].id == "b10"


def test_store_saves_and_deletes_goals(tmp_path):
    store = small_store(tmp_path)
    funded = replace(store.list_goals("u1")[0], current_amount=Decimal(150))
    store.save_goal(funded)
    store.save_goal(SavingsGoal("g2", "Trip", Decimal(800), Decimal(0), date(2024, 1, 1),
                                date(2024, 12, 1), "u1"))
    assert [g.current_amount for g in store.list_goals("u1")] == [Decimal(150), Decimal(0)]
    store.delete_goal("g1")
    assert [g.id for g in store.list_goals("u1")] == ["g2"]


def test_store_writes_leave_seed_file_untouched(tmp_path):
    store = small_store(tmp_path)
    before = store.path.read_text(encoding="utf-8")
    store.delete_goal("g1")
    assert store.path.read_text(encoding="utf-8") == before


def test_reopened_snapshot_matches_reducer_result(tmp_path):
    store = small_store(tmp_path)
    snap = open_snapshot(store, StaticSession("u1"))
    budget = Budget("b1", "2024-06", Decimal(180), "u1")
    reduced = upsert_budget(snap, budget).get_or_else(snap)
    store.save_budget(budget)
    goal_id = snap.goals[0].id
    reduced = fund(reduced, goal_id, Decimal(50)).get_or_else(reduced)
    store.save_goal(next(g for g in reduced.goals if g.id == goal_id))
    assert open_snapshot(store, StaticSession("u1")) == reduced
