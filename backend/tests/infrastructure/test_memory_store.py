"""In-Memory Profile Store — predicate evaluation, ordering and paging without a database.

Tests cover:
    - Every predicate node, including empty AnyOf/AllOf
    - Search is case-insensitive and literal; experience is searched as text
    - Specialties match-ANY; records without specialties never match
    - Sort orders are total: ties broken by id ascending
    - from_rows normalizes legacy stringified specialties
"""

import pytest

from directory_api.core.domain_types import (
    Comparison, ProfileField, SortDirection, SortField,
)
from directory_api.core.errors import InternalQueryError
from directory_api.core.facets import FACET_PROJECTION
from directory_api.core.filter_criteria import FilterCriteria
from directory_api.core.predicates import (
    MATCH_ALL, AllOf, AnyOf, Compare, Contains, OneOf, Overlaps,
    build_predicate,
)
from directory_api.core.resolve_sort import resolve_sort
from directory_api.infrastructure.memory_store import (
    InMemoryProfileStore, matches, record_from_row,
)
from tests.profile_factory import make_record


@pytest.fixture
def store(directory_records):
    return InMemoryProfileStore(directory_records)


async def _ids(store, criteria: FilterCriteria) -> list[int]:
    records = await store.query(
        build_predicate(criteria),
        resolve_sort(criteria.sort_field, criteria.sort_direction),
        0, 100,
    )
    return [r.id for r in records]


# ─── matches() ───────────────────────────────────────────────────

def test_empty_all_of_matches_everything():
    assert matches(MATCH_ALL, make_record(1))


def test_empty_any_of_matches_nothing():
    assert not matches(AnyOf(()), make_record(1))


def test_contains_is_case_insensitive():
    record = make_record(1, first_name="Janet")
    assert matches(Contains(ProfileField.FIRST_NAME, "JAN"), record)
    assert not matches(Contains(ProfileField.FIRST_NAME, "bob"), record)


def test_contains_treats_wildcards_literally():
    record = make_record(1, first_name="Janet")
    assert not matches(Contains(ProfileField.FIRST_NAME, "%"), record)
    assert not matches(Contains(ProfileField.FIRST_NAME, "j_net"), record)


def test_contains_on_experience_matches_text_form():
    record = make_record(1, years_of_experience=15)
    assert matches(Contains(ProfileField.YEARS_OF_EXPERIENCE, "5"), record)
    assert not matches(Contains(ProfileField.YEARS_OF_EXPERIENCE, "2"), record)


def test_one_of_is_exact_and_case_sensitive():
    record = make_record(1, city="austin")
    assert matches(OneOf(ProfileField.CITY, ("austin",)), record)
    assert not matches(OneOf(ProfileField.CITY, ("Austin",)), record)


def test_overlaps_is_match_any():
    record = make_record(1, specialties=("A", "B"))
    assert matches(Overlaps(ProfileField.SPECIALTIES, ("B", "C")), record)
    assert not matches(Overlaps(ProfileField.SPECIALTIES, ("C",)), record)


def test_overlaps_never_matches_empty_specialties():
    record = make_record(1, specialties=())
    assert not matches(Overlaps(ProfileField.SPECIALTIES, ("A",)), record)


def test_compare_bounds_are_inclusive():
    record = make_record(1, years_of_experience=10)
    gte = Compare(ProfileField.YEARS_OF_EXPERIENCE, Comparison.GTE, 10)
    lte = Compare(ProfileField.YEARS_OF_EXPERIENCE, Comparison.LTE, 10)
    assert matches(AllOf((gte, lte)), record)


def test_unknown_node_raises_internal_error():
    with pytest.raises(InternalQueryError):
        matches("not a predicate", make_record(1))


# ─── Store operations ────────────────────────────────────────────

async def test_count_matches_query_length(store):
    predicate = build_predicate(FilterCriteria(degrees=frozenset({"MD", "PhD"})))
    assert await store.count(predicate) == 4


async def test_search_spans_names_city_degree_and_experience(store):
    assert await _ids(store, FilterCriteria(name_search="jan")) == [1, 2]
    assert await _ids(store, FilterCriteria(name_search="5")) == [2, 6]
    assert await _ids(store, FilterCriteria(name_search="msw")) == [3, 5]


async def test_specialties_filter_is_match_any(store):
    criteria = FilterCriteria(specialties=frozenset({"PTSD", "Grief"}))
    assert await _ids(store, criteria) == [1, 3, 6]


async def test_inverted_experience_range_matches_nothing(store):
    criteria = FilterCriteria(min_experience=10, max_experience=5)
    assert await _ids(store, criteria) == []


async def test_default_order_is_id_ascending(store):
    assert await _ids(store, FilterCriteria()) == [1, 2, 3, 4, 5, 6]


async def test_text_sort_is_case_insensitive(store):
    criteria = FilterCriteria(sort_field=SortField.FIRST_NAME)
    assert await _ids(store, criteria) == [4, 5, 6, 1, 2, 3]


async def test_descending_sort_breaks_ties_by_id_ascending(store):
    criteria = FilterCriteria(
        sort_field=SortField.CITY, sort_direction=SortDirection.DESC,
    )
    assert await _ids(store, criteria) == [2, 5, 3, 6, 1, 4]


async def test_numeric_sort(store):
    criteria = FilterCriteria(
        sort_field=SortField.YEARS_OF_EXPERIENCE,
        sort_direction=SortDirection.DESC,
    )
    assert await _ids(store, criteria) == [5, 6, 4, 3, 2, 1]


async def test_query_slices_by_offset_and_limit(store):
    records = await store.query(MATCH_ALL, resolve_sort(None, SortDirection.ASC), 4, 3)
    assert [r.id for r in records] == [5, 6]


async def test_offset_past_end_returns_empty_page(store):
    records = await store.query(MATCH_ALL, resolve_sort(None, SortDirection.ASC), 60, 20)
    assert records == []


async def test_all_returns_projected_rows(store):
    rows = await store.all(None, FACET_PROJECTION)
    assert len(rows) == 6
    assert rows[0] == {
        "city": "Austin",
        "degree": "MD",
        "specialties": ["Trauma", "PTSD"],
        "years_of_experience": 2,
    }


async def test_all_with_predicate_filters_rows(store):
    rows = await store.all(build_predicate(FilterCriteria(cities=frozenset({"Boston"}))))
    assert [r["id"] for r in rows] == [3, 6]


# ─── from_rows() ─────────────────────────────────────────────────

def test_record_from_row_decodes_legacy_specialties():
    record = record_from_row({
        "id": "7", "first_name": "Legacy", "last_name": "Row",
        "city": "Chicago", "degree": "MD",
        "specialties": '["Grief", "Trauma"]',
        "years_of_experience": 30,
    })
    assert record.id == 7
    assert record.specialties == ("Grief", "Trauma")
    assert record.phone_number == 0


async def test_from_rows_matches_normalized_specialties():
    store = InMemoryProfileStore.from_rows([
        {"id": 2, "first_name": "B", "last_name": "B", "city": "X", "degree": "MD",
         "specialties": "not json", "years_of_experience": 1},
        {"id": 1, "first_name": "A", "last_name": "A", "city": "X", "degree": "MD",
         "specialties": '["Grief"]', "years_of_experience": 1},
    ])
    predicate = Overlaps(ProfileField.SPECIALTIES, ("Grief",))
    assert await store.count(predicate) == 1
    assert await store.count(MATCH_ALL) == 2
