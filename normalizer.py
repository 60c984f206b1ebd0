"""
normalizer.py
-------------
Turn rows from the database, the API or the entry form into canonical
``TransactionRecord`` objects. Every function here is total: bad fields
degrade to safe defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping

from models import TransactionRecord, TransactionType


def _get(raw: Any, key: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def normalize_date(value: Any) -> str:
    """Date-only ``YYYY-MM-DD`` string, or ``""`` when unknown."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return ""
    candidate = value.strip().split("T")[0].split(" ")[0]
    try:
        return datetime.strptime(candidate, "%Y-%m-%d").date().isoformat()
    except ValueError:
        return ""


def normalize_tags(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        # Empty segments are kept: "a,,b" -> ["a", "", "b"]
        return [t.strip() for t in value.split(",")]
    return []


def normalize_type(value: Any) -> TransactionType:
    if value == TransactionType.INCOME.value:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def normalize_amount(value: Any) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_record(raw: Any) -> TransactionRecord:
    """Collapse a loosely-typed row into a ``TransactionRecord``.

    ``raw`` may be a mapping, an ORM row or an existing record. Applying this
    twice gives the same result as applying it once.
    """
    if isinstance(raw, TransactionRecord):
        raw = asdict(raw)
    if raw is None:
        raw = {}

    return TransactionRecord(
        id=_text(_get(raw, "id")),
        amount=normalize_amount(_get(raw, "amount")),
        description=_text(_get(raw, "description")),
        category=_text(_get(raw, "category") or "Other"),
        date=normalize_date(_get(raw, "date")),
        type=normalize_type(_get(raw, "type")),
        tags=normalize_tags(_get(raw, "tags")),
    )


def normalize_records(rows: Iterable[Any]) -> List[TransactionRecord]:
    return [normalize_record(r) for r in rows]
