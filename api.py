"""Read-only reporting API over the same store, filters and aggregates as the app."""

from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

import aggregator
from database import get_db, init_db
from errors import StoreError
from export import EXPORT_FILENAME, to_csv
from filters import evaluate
from logging_setup import configure_logging
from models import FilterSpec, TransactionRecord
from store import TransactionStore, load_budgets


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


app = FastAPI(title="Expense Tracker API", version="0.1.0", lifespan=lifespan)


class TransactionOut(BaseModel):
    id: str
    amount: float
    description: str
    category: str
    date: str
    type: str
    tags: List[str]


class MonthlyTotalOut(BaseModel):
    month: str
    expenses: float
    income: float


class CategoryTotalOut(BaseModel):
    category: str
    amount: float


class DailyTotalOut(BaseModel):
    date: date
    label: str
    amount: float


class BudgetOut(BaseModel):
    category: str
    limit: float
    spent: float
    percentage: float


class SummaryOut(BaseModel):
    income: float
    expenses: float
    net: float
    income_count: int
    expense_count: int
    top_categories: List[CategoryTotalOut]
    budgets: List[BudgetOut]


def filter_params(
    search: str = "",
    category: str = "",
    type: str = "",
    date_from: str = "",
    date_to: str = "",
    min_amount: str = "",
    max_amount: str = "",
    tags: Optional[List[str]] = Query(None),
) -> FilterSpec:
    return FilterSpec(
        search=search,
        category=category,
        type=type,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        tags=tuple(tags or ()),
    )


def load_records(user_id: int, db: Session) -> List[TransactionRecord]:
    try:
        return TransactionStore(db).fetch_all(user_id)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


def _out(record: TransactionRecord) -> TransactionOut:
    return TransactionOut(**record.to_dict())


@app.get("/users/{user_id}/transactions", response_model=List[TransactionOut])
def list_transactions(user_id: int, spec: FilterSpec = Depends(filter_params), db: Session = Depends(get_db)):
    return [_out(r) for r in evaluate(load_records(user_id, db), spec)]


@app.get("/users/{user_id}/reports/monthly", response_model=List[MonthlyTotalOut])
def monthly_report(user_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    series = aggregator.monthly_series(load_records(user_id, db), today)
    return [MonthlyTotalOut(month=m.month, expenses=m.expenses, income=m.income) for m in series]


@app.get("/users/{user_id}/reports/categories", response_model=List[CategoryTotalOut])
def category_report(user_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    totals = aggregator.category_totals(load_records(user_id, db), today)
    return [CategoryTotalOut(category=c, amount=a) for c, a in totals]


@app.get("/users/{user_id}/reports/daily", response_model=List[DailyTotalOut])
def daily_report(user_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    series = aggregator.daily_series(load_records(user_id, db), today)
    return [DailyTotalOut(date=d.day, label=d.label, amount=d.amount) for d in series]


@app.get("/users/{user_id}/reports/summary", response_model=SummaryOut)
def summary_report(user_id: int, today: Optional[date] = None, db: Session = Depends(get_db)):
    records = load_records(user_id, db)
    summary = aggregator.month_summary(records, today)
    try:
        budgets = load_budgets(db, user_id)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    progress = aggregator.budget_progress(aggregator.category_totals(records, today), budgets)
    return SummaryOut(
        income=summary.income,
        expenses=summary.expenses,
        net=summary.net,
        income_count=summary.income_count,
        expense_count=summary.expense_count,
        top_categories=[CategoryTotalOut(category=c, amount=a) for c, a in summary.top_categories],
        budgets=[BudgetOut(category=b.category, limit=b.limit, spent=b.spent, percentage=b.percentage) for b in progress],
    )


@app.get("/users/{user_id}/export.csv", response_class=PlainTextResponse)
def export_csv(user_id: int, spec: FilterSpec = Depends(filter_params), db: Session = Depends(get_db)):
    body = to_csv(evaluate(load_records(user_id, db), spec))
    return PlainTextResponse(
        body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host="0.0.0.0", port=8001, reload=True)
