"""Filtering for the transaction log (search box, selectors, ranges, tags)."""

from __future__ import annotations

import math
from dataclasses import fields
from datetime import date, datetime
from typing import Iterable, List, Optional

from models import FilterSpec, TransactionRecord


def parse_amount_bound(value) -> Optional[float]:
    """Numeric bound from user text; ``None`` means unconstrained."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        bound = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            bound = float(text)
        except ValueError:
            return None
    return bound if math.isfinite(bound) else None


def parse_date_bound(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _matches(record: TransactionRecord, spec: FilterSpec, bounds) -> bool:
    date_from, date_to, min_amount, max_amount, wanted_tags = bounds

    if spec.search and spec.search.lower() not in record.description.lower():
        return False

    if spec.category and record.category != spec.category:
        return False

    if spec.type and record.type != spec.type:
        return False

    # Records without a usable date are not excluded by a date range
    if date_from or date_to:
        record_date = parse_date_bound(record.date)
        if record_date is not None:
            if date_from and record_date < date_from:
                return False
            if date_to and record_date > date_to:
                return False

    if min_amount is not None and record.amount < min_amount:
        return False
    if max_amount is not None and record.amount > max_amount:
        return False

    if wanted_tags and not wanted_tags.intersection(record.tags or []):
        return False

    return True


def evaluate(records: Iterable[TransactionRecord], spec: Optional[FilterSpec] = None) -> List[TransactionRecord]:
    """Return the records matching every active predicate, in input order."""
    records = list(records)
    if spec is None:
        return records

    bounds = (
        parse_date_bound(spec.date_from),
        parse_date_bound(spec.date_to),
        parse_amount_bound(spec.min_amount),
        parse_amount_bound(spec.max_amount),
        set(spec.tags or ()),
    )
    return [r for r in records if _matches(r, spec, bounds)]


def available_categories(records: Iterable[TransactionRecord]) -> List[str]:
    return list(dict.fromkeys(r.category for r in records))


def available_tags(records: Iterable[TransactionRecord]) -> List[str]:
    return list(dict.fromkeys(t for r in records for t in (r.tags or [])))


def has_active_filters(spec: FilterSpec) -> bool:
    return active_filter_count(spec) > 0


def active_filter_count(spec: FilterSpec) -> int:
    """Number of non-blank filter values; each selected tag counts once."""
    count = 0
    for f in fields(spec):
        value = getattr(spec, f.name)
        if f.name == "tags":
            count += len([t for t in value if t])
        elif value not in ("", None):
            count += 1
    return count
