"""Validation for the add / edit transaction form."""

from __future__ import annotations

import math
from datetime import date
from typing import List, Optional, Sequence

from errors import ValidationError
from models import TransactionRecord
from normalizer import normalize_record

DEFAULT_CATEGORIES = [
    "Food", "Transport", "Entertainment", "Utilities",
    "Healthcare", "Shopping", "Salary", "Freelance", "Other",
]


def validate_entry(
    amount,
    description: str,
    category: str,
    date_value=None,
    txn_type: str = "expense",
    tags: Optional[Sequence[str]] = None,
) -> TransactionRecord:
    """
    Check the raw form values and build an unsaved record.

    Raises ``ValidationError`` with a user-facing message when a required field
    is missing or the amount is not a positive number.
    """
    amount_text = "" if amount is None else str(amount).strip()
    if not amount_text or not (description or "").strip() or not category:
        raise ValidationError("Please fill in all required fields")

    try:
        parsed = float(amount_text)
    except ValueError:
        raise ValidationError("Please enter a valid amount") from None
    if not math.isfinite(parsed) or parsed <= 0:
        raise ValidationError("Please enter a valid amount")

    return normalize_record({
        "amount": parsed,
        "description": description,
        "category": category,
        "date": date_value or date.today(),
        "type": txn_type,
        "tags": list(tags or []),
    })


def add_tag(tags: Sequence[str], new_tag: str) -> List[str]:
    """Append a trimmed tag unless it is blank or already present."""
    tag = (new_tag or "").strip()
    current = list(tags)
    if tag and tag not in current:
        current.append(tag)
    return current
