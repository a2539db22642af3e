import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uuid
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from ledger import config
from ledger.aggregation import expenses_by_category, filter_expenses
from ledger.domain import Expense, SavingsGoal
from ledger.formatting import format_currency, format_date, month_label, short_month_label
from ledger.functional import parse_category_limits, to_decimal
from ledger.logger import get_logger
from ledger.months import available_months, current_month
from ledger.progress import progress_level
from ledger.seed import JsonSeedStore, StaticSession, open_snapshot
from ledger.services import BudgetService, InsightsService
from ledger.snapshot import (
    add_expense,
    add_goal,
    current_budget,
    delete_expense,
    delete_goal,
    fund,
    update_expense,
    update_goal,
    upsert_budget,
)
from ledger.taxonomy import categories, category_color, category_label

logger = get_logger(__name__)

st.set_page_config(page_title="Budget Tracker", layout="wide")

LEVEL_COLORS = {"ok": "#22c55e", "warning": "#f59e0b", "over": "#ef4444"}


def money(amount) -> str:
    return format_currency(amount, config.CURRENCY_SYMBOL)


def find(records, record_id):
    return next(r for r in records if r.id == record_id)


def commit(outcome, write):
    """Show a rejected change, or keep the new snapshot and hand it to ``write`` for the store."""
    if outcome.is_left():
        st.error(outcome.get_error()["message"])
        return
    st.session_state.snapshot = outcome.get_or_else(st.session_state.snapshot)
    write(st.session_state.snapshot)
    st.rerun()


if "snapshot" not in st.session_state:
    st.session_state.store = JsonSeedStore(config.SEED_PATH)
    st.session_state.snapshot = open_snapshot(st.session_state.store, StaticSession(config.OWNER_ID))

store = st.session_state.store
snapshot = st.session_state.snapshot
owner_id = snapshot.owner_id or ""
today = date.today()

st.sidebar.markdown(f"### 👤 {snapshot.owner_id or 'Signed out'}")
month = st.sidebar.selectbox(
    "Month",
    options=available_months(snapshot.expenses, today),
    format_func=month_label,
)
menu = st.sidebar.radio("Menu", ["💰 Budget", "🧾 Expenses", "🎯 Savings", "📊 Insights"])

budget_service = BudgetService()
insights_service = InsightsService(months=config.SUMMARY_MONTHS)

if menu == "💰 Budget":
    st.title(f"Budget for {month_label(month)}")
    report = budget_service.monthly_report(snapshot, month)
    result = report["result"]

    if not report["has_budget"]:
        st.info("You haven't set a budget for this month yet")
    else:
        k1, k2, k3 = st.columns(3)
        with k1:
            st.metric("Spent", money(result["spent"]))
        with k2:
            st.metric("Budget", money(result["total_limit"]))
        with k3:
            st.metric("Remaining", money(max(result["remaining"], Decimal(0))))
        st.caption(f"{result['progress']:.0f}% of your budget used")
        st.progress(min(result["progress"], 100.0) / 100)
        if result["over_budget"]:
            st.error(f"You are {money(-result['remaining'])} over budget")

    st.subheader("Category Breakdown")
    rows = result["categories"]
    if rows:
        df = pd.DataFrame([
            {
                "Category": category_label(r["category"]),
                "Spent": float(r["spent"]),
                "Limit": float(r["limit"]) if r["limit"] > 0 else None,
                "Progress": r["progress"],
                "Status": progress_level(r["progress"]) if r["limit"] > 0 else "no limit",
            }
            for r in rows
        ])
        fig = go.Figure(go.Bar(
            x=[min(p, 100.0) for p in df["Progress"]],
            y=df["Category"],
            orientation="h",
            marker_color=[
                LEVEL_COLORS.get(status, "#9CA3AF") for status in df["Status"]
            ],
        ))
        fig.update_layout(xaxis=dict(range=[0, 100], title="% of limit"), margin=dict(t=10, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No expenses or budget categories yet")

    budget = current_budget(snapshot.budgets, month, owner_id)
    with st.form("set_budget"):
        st.subheader("Set Budget")
        total_raw = st.text_input(
            "Total monthly budget",
            value=str(budget.total_limit) if budget.total_limit > 0 else "",
            placeholder="0.00",
        )
        st.caption("Category limits (leave blank for no limit)")
        limit_cols = st.columns(3)
        limits_raw = {}
        for i, c in enumerate(categories()):
            limit = budget.category_limits.get(c)
            limits_raw[c] = limit_cols[i % 3].text_input(
                category_label(c), value="" if limit is None else str(limit), key=f"limit_{c.value}"
            )
        if st.form_submit_button("Save Budget"):
            outcome = (
                to_decimal(total_raw)
                .bind(lambda total: parse_category_limits(limits_raw).map(
                    lambda limits: replace(budget, total_limit=total, category_limits=limits)
                ))
                .bind(lambda b: upsert_budget(snapshot, b))
            )
            commit(outcome, lambda new: store.save_budget(find(new.budgets, budget.id)))

elif menu == "🧾 Expenses":
    st.title("🧾 Expenses")

    col1, col2, col3 = st.columns(3)
    with col1:
        search = st.text_input("Search description")
    with col2:
        category = st.selectbox(
            "Category",
            options=[None, *categories()],
            format_func=lambda c: "All categories" if c is None else category_label(c),
        )
    with col3:
        sort_by = st.selectbox("Sort by", ["date", "amount"])

    shown = filter_expenses(snapshot.expenses, month=month, search=search, category=category, sort_by=sort_by)
    if shown:
        df = pd.DataFrame([
            {
                "Date": format_date(e.date),
                "Description": e.description,
                "Category": category_label(e.category),
                "Amount": money(e.amount),
                "id": e.id,
            }
            for e in shown
        ])
        st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)
        st.metric("Total", money(sum((e.amount for e in shown), Decimal(0))))

        labels = {e.id: f"{format_date(e.date)} · {e.description or category_label(e.category)} · {money(e.amount)}"
                  for e in shown}
        selected = st.selectbox("Edit or delete expense", options=[None, *df["id"]],
                                format_func=lambda i: "-" if i is None else labels[i])
        if selected:
            chosen = find(snapshot.expenses, selected)
            with st.form(f"edit_expense_{chosen.id}"):
                st.subheader("Edit Expense")
                edit_description = st.text_input("Description", value=chosen.description, key=f"desc_{chosen.id}")
                edit_amount = st.text_input("Amount", value=str(chosen.amount), key=f"amount_{chosen.id}")
                edit_category = st.selectbox("Category", categories(), format_func=category_label,
                                             index=categories().index(chosen.category), key=f"cat_{chosen.id}")
                edit_date = st.date_input("Date", value=chosen.date, key=f"date_{chosen.id}")
                if st.form_submit_button("Update"):
                    outcome = to_decimal(edit_amount).bind(lambda amount: update_expense(snapshot, replace(
                        chosen,
                        amount=amount,
                        description=edit_description,
                        category=edit_category,
                        date=edit_date,
                    )))
                    commit(outcome, lambda new: store.save_expense(find(new.expenses, chosen.id)))
            if st.button("Delete"):
                st.session_state.snapshot = delete_expense(snapshot, chosen.id)
                store.delete_expense(chosen.id)
                st.rerun()
    else:
        st.info("No expenses match the selected filters")

    with st.form("add_expense", clear_on_submit=True):
        st.subheader("Add Expense")
        description = st.text_input("Description")
        amount_raw = st.text_input("Amount", placeholder="0.00")
        new_category = st.selectbox("Category", categories(), format_func=category_label, key="new_cat")
        spent_on = st.date_input("Date", value=today)
        if st.form_submit_button("Add"):
            expense_id = str(uuid.uuid4())
            outcome = to_decimal(amount_raw).bind(lambda amount: add_expense(snapshot, Expense(
                id=expense_id,
                amount=amount,
                description=description,
                category=new_category,
                date=spent_on,
                created_at=datetime.now(),
                owner_id=owner_id,
            )))
            commit(outcome, lambda new: store.save_expense(find(new.expenses, expense_id)))

elif menu == "🎯 Savings":
    st.title("🎯 Savings Goals")
    goals = insights_service.savings_report(snapshot, today)
    if not goals:
        st.info("Create your first goal to start tracking savings")

    with st.expander("➕ New Goal"):
        with st.form("add_goal", clear_on_submit=True):
            name = st.text_input("Goal name")
            target_raw = st.text_input("Target amount", placeholder="0.00")
            s1, s2 = st.columns(2)
            start = s1.date_input("Start date", value=today)
            target_date = s2.date_input("Target date", value=today)
            label = st.text_input("Category (optional)")
            if st.form_submit_button("Create Goal"):
                goal_id = str(uuid.uuid4())
                if not name.strip():
                    st.error("Please enter a goal name")
                else:
                    outcome = to_decimal(target_raw).bind(lambda target: add_goal(snapshot, SavingsGoal(
                        id=goal_id,
                        name=name.strip(),
                        target_amount=target,
                        current_amount=Decimal(0),
                        start_date=start,
                        target_date=target_date,
                        owner_id=owner_id,
                        category=label.strip() or None,
                    )))
                    commit(outcome, lambda new: store.save_goal(find(new.goals, goal_id)))

    for row in goals:
        goal = row["goal"]
        with st.container(border=True):
            st.markdown(f"**{goal.name}**" + (f" · {goal.category}" if goal.category else ""))
            st.progress(min(row["progress"], 100.0) / 100)
            c1, c2, c3 = st.columns(3)
            c1.caption(f"{money(goal.current_amount)} of {money(goal.target_amount)}")
            c2.caption(f"{row['progress']:.0f}%")
            c3.caption(f"Target {format_date(goal.target_date)} · {row['time_remaining']}")

            if row["progress"] < 100:
                with st.form(f"fund_{goal.id}", clear_on_submit=True):
                    raw = st.text_input("Amount to add", placeholder="0.00")
                    if st.form_submit_button("Add Funds"):
                        outcome = to_decimal(raw).bind(lambda amount: fund(snapshot, goal.id, amount))
                        commit(outcome, lambda new: store.save_goal(find(new.goals, goal.id)))

            with st.expander("Edit goal"):
                with st.form(f"edit_goal_{goal.id}"):
                    new_name = st.text_input("Goal name", value=goal.name, key=f"name_{goal.id}")
                    new_target = st.text_input("Target amount", value=str(goal.target_amount), key=f"target_{goal.id}")
                    d1, d2 = st.columns(2)
                    new_start = d1.date_input("Start date", value=goal.start_date, key=f"start_{goal.id}")
                    new_due = d2.date_input("Target date", value=goal.target_date, key=f"due_{goal.id}")
                    new_label = st.text_input("Category (optional)", value=goal.category or "", key=f"label_{goal.id}")
                    if st.form_submit_button("Update Goal"):
                        outcome = to_decimal(new_target).bind(lambda target: update_goal(snapshot, replace(
                            goal,
                            name=new_name.strip() or goal.name,
                            target_amount=target,
                            start_date=new_start,
                            target_date=new_due,
                            category=new_label.strip() or None,
                        )))
                        commit(outcome, lambda new: store.save_goal(find(new.goals, goal.id)))
                if st.button("Delete goal", key=f"delete_{goal.id}"):
                    st.session_state.snapshot = delete_goal(snapshot, goal.id)
                    store.delete_goal(goal.id)
                    st.rerun()

elif menu == "📊 Insights":
    st.title("📊 Spending Insights")
    if not snapshot.expenses:
        st.info("Add some expenses to see insights about your spending habits")
    else:
        report = insights_service.spending_report(snapshot, today)
        summaries = report["summaries"]

        tab_cat, tab_trend, tab_cmp = st.tabs(["Spending by Category", "Monthly Trends", "Category Comparison"])
        with tab_cat:
            by_cat = expenses_by_category(snapshot.expenses, month)
            if by_cat:
                df_cat = pd.DataFrame(
                    [{"Category": category_label(c), "Total": float(v), "key": c.value} for c, v in by_cat.items()]
                )
                fig_cat = px.pie(
                    df_cat,
                    values="Total",
                    names="Category",
                    color="key",
                    color_discrete_map={c.value: category_color(c) for c in by_cat},
                )
                st.plotly_chart(fig_cat, use_container_width=True)
            else:
                st.info("No expense data available for this month")

        with tab_trend:
            fig_ts = go.Figure()
            fig_ts.add_trace(go.Scatter(
                x=[short_month_label(m.month) for m in summaries],
                y=[float(m.total) for m in summaries],
                mode="lines+markers",
                fill="tozeroy",
                name="Monthly Expenses",
                line=dict(color="#0D9488"),
            ))
            fig_ts.update_layout(margin=dict(t=30, b=10, l=10, r=10))
            st.plotly_chart(fig_ts, use_container_width=True)

        with tab_cmp:
            top = [c for c, _, _ in report["top_categories"]]
            recent = summaries[-3:]
            if top:
                fig_cmp = go.Figure()
                for c in top:
                    fig_cmp.add_trace(go.Bar(
                        name=category_label(c),
                        x=[short_month_label(m.month) for m in recent],
                        y=[float(m.per_category.amount(c)) for m in recent],
                        marker_color=category_color(c),
                    ))
                fig_cmp.update_layout(barmode="group")
                st.plotly_chart(fig_cmp, use_container_width=True)
            else:
                st.info("Not enough data to compare categories across months")

        left, right = st.columns(2)
        with left:
            st.subheader("Spending Stats")
            st.metric("Average monthly spending", money(report["average"]))
            highest, lowest = report["highest"], report["lowest"]
            if highest is not None:
                st.metric("Highest spending month", money(highest.total), month_label(highest.month), delta_color="off")
            if lowest is not None:
                st.metric("Lowest spending month", money(lowest.total), month_label(lowest.month), delta_color="off")
            else:
                st.caption("No data available")
        with right:
            st.subheader(f"Top Spending Categories · {month_label(report['month'])}")
            for c, amount, share in report["top_categories"]:
                st.markdown(f"{category_label(c)}: {money(amount)} ({share:.0f}%)")
                st.progress(min(share, 100.0) / 100)

logger.debug("Rendered %s for %s", menu, current_month(today))
