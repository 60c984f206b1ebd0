from filters import (
    active_filter_count,
    available_categories,
    available_tags,
    evaluate,
    has_active_filters,
    parse_amount_bound,
)
from models import FilterSpec

from helpers import make_record


def sample_records():
    return [
        make_record(id="1", amount=850, description="Grocery shopping at BigBasket", category="Food",
                    date="2024-10-03", tags=["essentials", "monthly"]),
        make_record(id="2", amount=45000, description="Freelance project payment", category="Freelance",
                    date="2024-10-10", type="income", tags=["work"]),
        make_record(id="3", amount=1200, description="Netflix and Spotify", category="Entertainment",
                    date="2024-09-08", tags=["subscriptions", "monthly"]),
        make_record(id="4", amount=2500, description="Electricity bill", category="Utilities",
                    date="2024-09-05", tags=[]),
    ]


def ids(records):
    return [r.id for r in records]


def test_empty_spec_returns_everything_in_order():
    records = sample_records()
    assert ids(evaluate(records, FilterSpec())) == ["1", "2", "3", "4"]
    assert ids(evaluate(records, None)) == ["1", "2", "3", "4"]


def test_search_is_case_insensitive_substring():
    assert ids(evaluate(sample_records(), FilterSpec(search="NETFLIX"))) == ["3"]
    assert ids(evaluate(sample_records(), FilterSpec(search="bi"))) == ["1", "4"]


def test_category_match_is_case_sensitive():
    assert ids(evaluate(sample_records(), FilterSpec(category="Food"))) == ["1"]
    assert evaluate(sample_records(), FilterSpec(category="food")) == []


def test_type_filter():
    assert ids(evaluate(sample_records(), FilterSpec(type="income"))) == ["2"]
    assert ids(evaluate(sample_records(), FilterSpec(type="expense"))) == ["1", "3", "4"]


def test_date_bounds_are_inclusive():
    spec = FilterSpec(date_from="2024-09-08", date_to="2024-10-03")
    assert ids(evaluate(sample_records(), spec)) == ["1", "3"]


def test_invalid_date_bound_is_ignored():
    spec = FilterSpec(date_from="not-a-date", date_to="2024-99-99")
    assert ids(evaluate(sample_records(), spec)) == ["1", "2", "3", "4"]


def test_record_without_date_is_not_excluded_by_date_range():
    records = [make_record(id="x", date="")]
    assert ids(evaluate(records, FilterSpec(date_from="2024-01-01"))) == ["x"]


def test_min_amount_example():
    records = [make_record(id="1", amount=850)]
    assert evaluate(records, FilterSpec(min_amount="1000")) == []
    assert ids(evaluate(records, FilterSpec(min_amount=""))) == ["1"]


def test_amount_bounds_are_inclusive():
    spec = FilterSpec(min_amount="850", max_amount="2500")
    assert ids(evaluate(sample_records(), spec)) == ["1", "3", "4"]


def test_unparsable_amount_bounds_do_not_exclude_everything():
    for bad in ["abc", "  ", "nan", "inf", "-inf", None]:
        spec = FilterSpec(min_amount=bad, max_amount=bad)
        assert len(evaluate(sample_records(), spec)) == 4


def test_numeric_amount_bounds():
    assert parse_amount_bound(12) == 12.0
    assert parse_amount_bound(" 7.5 ") == 7.5
    assert ids(evaluate(sample_records(), FilterSpec(max_amount=1000.0))) == ["1"]


def test_tags_match_any_selected():
    assert ids(evaluate(sample_records(), FilterSpec(tags=("monthly",)))) == ["1", "3"]
    assert ids(evaluate(sample_records(), FilterSpec(tags=("work", "subscriptions")))) == ["2", "3"]
    assert evaluate(sample_records(), FilterSpec(tags=("missing",))) == []


def test_predicates_combine_with_and():
    spec = FilterSpec(type="expense", tags=("monthly",), min_amount="1000")
    assert ids(evaluate(sample_records(), spec)) == ["3"]


def test_result_is_ordered_subset():
    records = sample_records()
    for spec in [FilterSpec(search="e"), FilterSpec(tags=("monthly",)), FilterSpec(max_amount="3000")]:
        result = evaluate(records, spec)
        positions = [records.index(r) for r in result]
        assert positions == sorted(positions)


def test_available_categories_and_tags_are_unique_first_seen():
    records = sample_records()
    assert available_categories(records) == ["Food", "Freelance", "Entertainment", "Utilities"]
    assert available_tags(records) == ["essentials", "monthly", "work", "subscriptions"]


def test_active_filter_helpers():
    assert not has_active_filters(FilterSpec())
    spec = FilterSpec(search="rent", min_amount="10", tags=("a", "b"))
    assert has_active_filters(spec)
    assert active_filter_count(spec) == 4
