# aggregator.py — derived views for the stat tiles and charts

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

import config
from models import BudgetProgress, DailyTotal, MonthlyTotal, MonthSummary, TransactionRecord

COLUMNS = ["Date", "Description", "Amount", "Category", "Type"]


def _today(now: Optional[date] = None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def _prep(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    """
    Frame with one row per record plus Month / Day helper columns.
    Rows with an empty or invalid date get NaT and fall outside every window.
    """
    df = pd.DataFrame(
        [[r.date, r.description, r.amount, r.category, str(getattr(r.type, "value", r.type))] for r in records],
        columns=COLUMNS,
    )
    df["Date"] = pd.to_datetime(df["Date"], format="%Y-%m-%d", errors="coerce")
    df["Amount"] = pd.to_numeric(df["Amount"], errors="coerce").fillna(0.0)
    df["Month"] = df["Date"].dt.to_period("M").astype(str)
    df["Day"] = df["Date"].dt.date
    return df


def _month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def monthly_series(records: Iterable[TransactionRecord], now: Optional[date] = None) -> List[MonthlyTotal]:
    """Income and expense totals for the trailing months, oldest first."""
    today = _today(now)
    df = _prep(records)
    months = pd.period_range(
        end=pd.Period(year=today.year, month=today.month, freq="M"),
        periods=config.MONTHLY_WINDOW,
        freq="M",
    )

    expenses = df[df["Type"] == "expense"].groupby("Month")["Amount"].sum()
    income = df[df["Type"] == "income"].groupby("Month")["Amount"].sum()

    return [
        MonthlyTotal(
            month=p.strftime("%b %Y"),
            expenses=float(expenses.get(str(p), 0.0)),
            income=float(income.get(str(p), 0.0)),
        )
        for p in months
    ]


def category_totals(records: Iterable[TransactionRecord], now: Optional[date] = None) -> List[Tuple[str, float]]:
    """Current-month expense totals per category, largest first."""
    today = _today(now)
    df = _prep(records)
    month_df = df[(df["Month"] == _month_key(today)) & (df["Type"] == "expense")]
    if month_df.empty:
        return []

    by_cat = month_df.groupby("Category")["Amount"].sum().sort_values(ascending=False, kind="stable")
    return [(str(cat), float(total)) for cat, total in by_cat.items()]


def daily_series(records: Iterable[TransactionRecord], now: Optional[date] = None) -> List[DailyTotal]:
    """Expense total for each of the trailing days (today included), zero-filled."""
    today = _today(now)
    df = _prep(records)
    days = pd.date_range(end=pd.Timestamp(today), periods=config.DAILY_WINDOW, freq="D")

    spent = df[df["Type"] == "expense"].dropna(subset=["Date"]).groupby("Day")["Amount"].sum()

    return [
        DailyTotal(day=d.date(), label=d.strftime("%b %d"), amount=float(spent.get(d.date(), 0.0)))
        for d in days
    ]


def month_summary(records: Iterable[TransactionRecord], now: Optional[date] = None, top_n: int = 3) -> MonthSummary:
    """Income, spend and net for the current month plus the biggest categories."""
    records = list(records)
    today = _today(now)
    df = _prep(records)
    month_df = df[df["Month"] == _month_key(today)]

    income_rows = month_df[month_df["Type"] == "income"]
    expense_rows = month_df[month_df["Type"] == "expense"]
    income = float(income_rows["Amount"].sum())
    expenses = float(expense_rows["Amount"].sum())

    return MonthSummary(
        income=income,
        expenses=expenses,
        net=income - expenses,
        income_count=len(income_rows),
        expense_count=len(expense_rows),
        top_categories=category_totals(records, today)[:top_n],
    )


def budget_progress(
    totals: Iterable[Tuple[str, float]],
    budgets: Mapping[str, float],
) -> List[BudgetProgress]:
    """Spend against each monthly budget, in budget order."""
    spent_by_cat: Dict[str, float] = dict(totals)
    progress = []
    for category, limit in budgets.items():
        limit = float(limit or 0)
        spent = float(spent_by_cat.get(category, 0.0))
        pct = spent / limit * 100 if limit > 0 else 0.0
        progress.append(BudgetProgress(category=category, limit=limit, spent=spent, percentage=pct))
    return progress
