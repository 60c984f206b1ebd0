"""Record builders shared by the test modules."""

from datetime import date

from normalizer import normalize_record

TODAY = date(2024, 10, 19)


def make_record(**kwargs):
    base = dict(
        amount=100.0,
        description="Lunch",
        category="Food",
        date="2024-10-03",
        type="expense",
        tags=[],
    )
    base.update(kwargs)
    return normalize_record(base)
