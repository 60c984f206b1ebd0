"""
store.py
--------
CRUD for transactions and budgets over a SQLAlchemy session.

Every failure is rolled back and raised as ``StoreError`` so callers can show a
message and leave their local state alone.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from database import CategoryBudget, Transaction
from errors import StoreError
from logging_setup import get_logger
from models import TransactionRecord
from normalizer import normalize_record, normalize_records

logger = get_logger("expense_tracker.store")

EDITABLE_FIELDS = ("amount", "description", "category", "date", "type", "tags")


def _row_values(record: TransactionRecord) -> dict:
    values = record.to_dict()
    values.pop("id")
    return values


class TransactionStore:
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: Exception) -> StoreError:
        self.db.rollback()
        logger.error("Transaction %s failed: %s", action, exc)
        return StoreError(f"Could not {action} transaction. Please try again.")

    def _get_row(self, txn_id: str, user_id: int) -> Transaction:
        row = (
            self.db.query(Transaction)
            .filter(Transaction.id == txn_id, Transaction.user_id == user_id)
            .first()
        )
        if row is None:
            raise StoreError("Transaction not found")
        return row

    def fetch_all(self, user_id: int) -> List[TransactionRecord]:
        """All of the user's transactions, most recent first."""
        try:
            rows = (
                self.db.query(Transaction)
                .filter(Transaction.user_id == user_id)
                .order_by(Transaction.date.desc(), Transaction.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("load", e) from e
        return normalize_records(rows)

    def insert(self, record: TransactionRecord, user_id: int) -> TransactionRecord:
        row = Transaction(id=uuid.uuid4().hex, user_id=user_id, **_row_values(normalize_record(record)))
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("save", e) from e
        logger.info("Inserted transaction %s for user %s", row.id, user_id)
        return normalize_record(row)

    def update(self, txn_id: str, changes: Mapping, user_id: int) -> TransactionRecord:
        """Apply a full or partial set of field changes to one of the user's rows."""
        try:
            row = self._get_row(txn_id, user_id)
            merged = normalize_record({**normalize_record(row).to_dict(), **dict(changes)})
            values = _row_values(merged)
            for key in EDITABLE_FIELDS:
                if key in changes:
                    setattr(row, key, values[key])
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        logger.info("Updated transaction %s", txn_id)
        return normalize_record(row)

    def delete(self, txn_id: str, user_id: int) -> None:
        try:
            row = self._get_row(txn_id, user_id)
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        logger.info("Deleted transaction %s", txn_id)


def load_budgets(db: Session, user_id: int) -> Dict[str, float]:
    """The user's monthly limits by category, or the defaults when none are saved."""
    try:
        budgets = (
            db.query(CategoryBudget)
            .filter(CategoryBudget.user_id == user_id)
            .order_by(CategoryBudget.id)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Loading budgets failed: %s", e)
        raise StoreError("Could not load budgets.") from e
    if not budgets:
        return dict(config.DEFAULT_BUDGETS)
    return {b.category: float(b.monthly_limit or 0) for b in budgets}


def save_budget(db: Session, user_id: int, category: str, limit: float) -> CategoryBudget:
    try:
        budget = (
            db.query(CategoryBudget)
            .filter(CategoryBudget.user_id == user_id, CategoryBudget.category == category)
            .first()
        )
        if budget:
            budget.monthly_limit = limit
        else:
            budget = CategoryBudget(user_id=user_id, category=category, monthly_limit=limit)
            db.add(budget)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Saving budget for %s failed: %s", category, e)
        raise StoreError("Could not save budget.") from e
    return budget
