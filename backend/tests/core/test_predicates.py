"""Predicate Builder — filters become an AND of structured clauses, never query text.

Tests cover:
    - No filters ⇒ empty AllOf (match everything)
    - Each filter contributes exactly one clause; absent filters contribute none
    - Search is an OR over names, city, degree and experience
    - Specialties use match-ANY (Overlaps)
    - like_pattern neutralizes LIKE wildcards
"""

from directory_api.core.domain_types import Comparison, ProfileField
from directory_api.core.filter_criteria import FilterCriteria
from directory_api.core.predicates import (
    MATCH_ALL, AllOf, AnyOf, Compare, Contains, OneOf, Overlaps,
    SEARCH_FIELDS, build_predicate, like_pattern,
)


def test_no_filters_builds_match_all():
    assert build_predicate(FilterCriteria()) == MATCH_ALL


def test_search_builds_or_group_over_search_fields():
    predicate = build_predicate(FilterCriteria(name_search="jan"))
    assert predicate == AllOf((
        AnyOf(tuple(Contains(f, "jan") for f in SEARCH_FIELDS)),
    ))
    assert ProfileField.YEARS_OF_EXPERIENCE in SEARCH_FIELDS


def test_city_and_degree_are_exact_membership():
    predicate = build_predicate(FilterCriteria(
        cities=frozenset({"Dallas", "Austin"}), degrees=frozenset({"MD"}),
    ))
    assert predicate.clauses == (
        OneOf(ProfileField.CITY, ("Austin", "Dallas")),
        OneOf(ProfileField.DEGREE, ("MD",)),
    )


def test_specialties_use_overlap_not_equality():
    predicate = build_predicate(FilterCriteria(specialties=frozenset({"B", "C"})))
    assert predicate.clauses == (
        Overlaps(ProfileField.SPECIALTIES, ("B", "C")),
    )


def test_experience_bounds_are_independent_clauses():
    only_min = build_predicate(FilterCriteria(min_experience=3))
    assert only_min.clauses == (
        Compare(ProfileField.YEARS_OF_EXPERIENCE, Comparison.GTE, 3),
    )
    both = build_predicate(FilterCriteria(min_experience=3, max_experience=10))
    assert both.clauses == (
        Compare(ProfileField.YEARS_OF_EXPERIENCE, Comparison.GTE, 3),
        Compare(ProfileField.YEARS_OF_EXPERIENCE, Comparison.LTE, 10),
    )


def test_zero_min_experience_is_still_a_clause():
    predicate = build_predicate(FilterCriteria(min_experience=0))
    assert len(predicate.clauses) == 1


def test_all_filters_combine_with_and():
    predicate = build_predicate(FilterCriteria(
        name_search="a",
        cities=frozenset({"Austin"}),
        degrees=frozenset({"MD"}),
        specialties=frozenset({"Trauma"}),
        min_experience=1,
        max_experience=30,
    ))
    assert isinstance(predicate, AllOf)
    assert len(predicate.clauses) == 6


def test_same_criteria_build_equal_predicates():
    criteria = FilterCriteria(cities=frozenset({"b", "a", "c"}))
    assert build_predicate(criteria) == build_predicate(criteria)
    assert hash(build_predicate(criteria)) == hash(build_predicate(criteria))


# ─── like_pattern ────────────────────────────────────────────────

def test_like_pattern_wraps_and_lowercases():
    assert like_pattern("Jan") == "%jan%"


def test_like_pattern_escapes_wildcards():
    assert like_pattern("50%_a") == "%50\\%\\_a%"


def test_like_pattern_escapes_escape_character_first():
    assert like_pattern("a\\%") == "%a\\\\\\%%"
