"""CSV export of the currently filtered transaction list."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from models import TransactionRecord

EXPORT_COLUMNS = ["Date", "Type", "Category", "Description", "Amount", "Tags"]
EXPORT_FILENAME = "expenses.csv"


def format_amount(amount: float) -> str:
    """Plain number text, without a trailing ``.0`` for whole amounts."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def to_frame(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    rows = [
        [
            r.date,
            r.type.value,
            r.category,
            r.description,
            format_amount(r.amount),
            ";".join(r.tags or []),
        ]
        for r in records
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def to_csv(records: Iterable[TransactionRecord]) -> str:
    """
    Header row then one row per record, in the given order.
    Fields holding a comma or quote are quoted; everything else is written bare.
    """
    return to_frame(records).to_csv(index=False, lineterminator="\n")
