from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


@dataclass
class TransactionRecord:
    """One expense or income entry, always in canonical shape.

    Build these through ``normalizer.normalize_record`` rather than directly so
    the invariants (string date, list tags, known type) hold.
    """

    amount: float
    description: str
    category: str
    date: str
    type: TransactionType = TransactionType.EXPENSE
    tags: List[str] = field(default_factory=list)
    id: str = ""

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "date": self.date,
            "type": self.type.value,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class FilterSpec:
    """Active filter predicates. Blank values mean "no constraint"."""

    search: str = ""
    category: str = ""
    type: str = ""
    date_from: str = ""
    date_to: str = ""
    min_amount: Union[str, float, None] = ""
    max_amount: Union[str, float, None] = ""
    tags: tuple = ()


@dataclass
class MonthlyTotal:
    month: str
    expenses: float = 0.0
    income: float = 0.0


@dataclass
class DailyTotal:
    day: date
    label: str
    amount: float = 0.0


@dataclass
class MonthSummary:
    income: float
    expenses: float
    net: float
    income_count: int
    expense_count: int
    top_categories: List[tuple] = field(default_factory=list)


@dataclass
class BudgetProgress:
    category: str
    limit: float
    spent: float
    percentage: float

    @property
    def is_over(self) -> bool:
        return self.spent > self.limit

    @property
    def remaining(self) -> float:
        return self.limit - self.spent


@dataclass
class ActionResult:
    ok: bool
    message: str
    record: Optional[TransactionRecord] = None
