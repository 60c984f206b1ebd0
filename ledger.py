"""
ledger.py
---------
The in-memory transaction list for one signed-in user, plus the active
filters. Local state only changes after the store call it depends on has
succeeded; failures come back as an ``ActionResult`` carrying the message to
show.
"""

from __future__ import annotations

from typing import List, Optional

from errors import StoreError
from export import to_csv
from filters import evaluate
from logging_setup import get_logger
from models import ActionResult, FilterSpec, TransactionRecord
from normalizer import normalize_record
from store import TransactionStore

logger = get_logger("expense_tracker.ledger")


def _label(record: TransactionRecord) -> str:
    return "Income" if record.is_income else "Expense"


class Ledger:
    def __init__(self, store: TransactionStore, user_id: int):
        self.store = store
        self.user_id = user_id
        self.records: List[TransactionRecord] = []
        self.filters = FilterSpec()

    def refresh(self) -> ActionResult:
        try:
            records = self.store.fetch_all(self.user_id)
        except StoreError as e:
            return ActionResult(False, str(e))
        self.records = records
        return ActionResult(True, f"Loaded {len(records)} transactions")

    def add(self, record: TransactionRecord) -> ActionResult:
        try:
            stored = self.store.insert(record, self.user_id)
        except StoreError as e:
            return ActionResult(False, str(e))
        self.records = [stored] + self.records
        return ActionResult(True, f"{_label(stored)} added successfully", stored)

    def edit(self, txn_id: str, record: TransactionRecord) -> ActionResult:
        if self.find(txn_id) is None:
            return ActionResult(False, "Transaction not found")
        changes = normalize_record(record).to_dict()
        changes.pop("id")
        try:
            stored = self.store.update(txn_id, changes, self.user_id)
        except StoreError as e:
            return ActionResult(False, str(e))
        # Full replacement, position kept
        self.records = [stored if r.id == txn_id else r for r in self.records]
        return ActionResult(True, f"{_label(stored)} updated successfully", stored)

    def remove(self, txn_id: str) -> ActionResult:
        if self.find(txn_id) is None:
            return ActionResult(False, "Transaction not found")
        try:
            self.store.delete(txn_id, self.user_id)
        except StoreError as e:
            return ActionResult(False, str(e))
        self.records = [r for r in self.records if r.id != txn_id]
        return ActionResult(True, "Transaction deleted successfully")

    def find(self, txn_id: str) -> Optional[TransactionRecord]:
        return next((r for r in self.records if r.id == txn_id), None)

    def set_filters(self, spec: FilterSpec) -> None:
        self.filters = spec

    def clear_filters(self) -> None:
        self.filters = FilterSpec()

    def visible(self) -> List[TransactionRecord]:
        return evaluate(self.records, self.filters)

    def recent(self, n: int = 5) -> List[TransactionRecord]:
        return self.records[:n]

    def export_csv(self) -> str:
        rows = self.visible()
        logger.info("Exporting %s of %s transactions", len(rows), len(self.records))
        return to_csv(rows)
