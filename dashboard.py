# dashboard.py — stat tiles, budget bars and charts for the Overview / Analytics tabs

from typing import List, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

import config
from models import BudgetProgress, DailyTotal, MonthlyTotal, MonthSummary

COLORS = [
    "#22c55e", "#ef4444", "#f97316", "#8b5cf6",
    "#06b6d4", "#f59e0b", "#ec4899", "#6b7280",
]

CATEGORY_COLORS = {
    "food": "#f97316",
    "transport": "#3b82f6",
    "entertainment": "#a855f7",
    "utilities": "#eab308",
    "healthcare": "#ef4444",
    "shopping": "#ec4899",
    "salary": "#22c55e",
    "freelance": "#06b6d4",
    "rent": "#3b82f6",
    "other": "#6b7280",
}


def category_color(category: str) -> str:
    """Badge colour for a category, matched case-insensitively."""
    return CATEGORY_COLORS.get((category or "other").lower(), CATEGORY_COLORS["other"])


def money(value: float) -> str:
    return f"{config.CURRENCY_SYMBOL}{value:,.0f}"


def kpis(summary: MonthSummary, budgets: List[BudgetProgress]):
    """
    The four top-level tiles: income, spend, net and budget status for the
    current month.
    """
    col1, col2, col3, col4 = st.columns(4)

    col1.metric("💰 Monthly Income", money(summary.income), help=f"{summary.income_count} transactions")
    col2.metric("💸 Monthly Expenses", money(summary.expenses), help=f"{summary.expense_count} transactions")
    sign = "+" if summary.net >= 0 else "-"
    col3.metric("📊 Net Amount", f"{sign}{money(abs(summary.net))}", help="This month's balance")

    with col4:
        st.caption("🎯 Budget Status")
        if budgets:
            for b in budgets[:2]:
                st.progress(min(b.percentage, 100) / 100, text=f"{b.category} {round(b.percentage)}%")
        else:
            st.caption("No budgets set")

    if summary.top_categories:
        st.caption("Top categories: " + " • ".join(f"{cat} {money(total)}" for cat, total in summary.top_categories))


def budget_bars(budgets: List[BudgetProgress]):
    for b in budgets:
        status_label = "On track" if not b.is_over else "Over budget"
        st.markdown(f"**{b.category}** — {money(b.spent)} / {money(b.limit)} ({status_label})")
        st.progress(min(1.0, b.percentage / 100), text=f"{b.percentage:.1f}% used")
        if b.is_over:
            st.error(f"Over by {money(abs(b.remaining))}. Consider pausing discretionary spend here.")


def income_vs_expense_monthly(monthly: List[MonthlyTotal]):
    """
    Bar chart of Income vs Expenses per month.
    """
    fig = go.Figure()
    fig.add_trace(go.Bar(x=[m.month for m in monthly], y=[m.income for m in monthly], name="Income", marker_color="#22c55e"))
    fig.add_trace(go.Bar(x=[m.month for m in monthly], y=[m.expenses for m in monthly], name="Expenses", marker_color="#ef4444"))

    fig.update_layout(barmode="group", title="Monthly Income vs Expenses", height=300)
    fig.update_yaxes(tickprefix=config.CURRENCY_SYMBOL)
    return fig


def cat_spend(totals: List[Tuple[str, float]]):
    """
    Pie chart of this month's spending by category.
    """
    by_cat = pd.DataFrame(totals, columns=["Category", "Amount"])

    fig = px.pie(
        by_cat, values="Amount", names="Category",
        title="Category Breakdown", color_discrete_sequence=COLORS,
    )
    fig.update_traces(textposition="inside", textinfo="percent+label")
    fig.update_layout(height=250)
    return fig


def daily_spend(daily: List[DailyTotal]):
    """
    Line chart of expenses per day over the trailing window.
    """
    df = pd.DataFrame({"Date": [d.label for d in daily], "Amount": [d.amount for d in daily]})

    fig = px.line(df, x="Date", y="Amount", markers=True, title=f"Daily Spending (Last {len(daily)} Days)")
    fig.update_layout(height=250)
    fig.update_yaxes(tickprefix=config.CURRENCY_SYMBOL)
    return fig
