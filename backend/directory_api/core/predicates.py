"""Predicate Tree — filters as data, never as query text.

Invariants:
    - build_predicate() returns an AllOf; its clauses are exactly the filters present
    - AllOf(()) matches every record (no filters ⇒ unfiltered result)
    - Node values are literals; adapters bind them as parameters, never format them in
    - Contains is case-insensitive and literal: "%" and "_" match themselves

Design Decisions:
    - Frozen dataclasses + structural pattern matching in adapters: the tree is
      hashable, comparable in tests, and needs no visitor boilerplate
    - Specialty filter is match-ANY (Overlaps): a record matches when its
      specialties intersect the requested set. Exact-set and contains-all
      variants are intentionally not expressible
    - like_pattern() lives here, not in the SQL adapter: literal-substring
      semantics are part of the predicate contract, not a storage detail
"""

from dataclasses import dataclass

from directory_api.core.domain_types import Comparison, ProfileField
from directory_api.core.filter_criteria import FilterCriteria

LIKE_ESCAPE = "\\"

SEARCH_FIELDS = (
    ProfileField.FIRST_NAME,
    ProfileField.LAST_NAME,
    ProfileField.CITY,
    ProfileField.DEGREE,
    ProfileField.YEARS_OF_EXPERIENCE,
)


# ─── Nodes ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match on the field's text form."""
    field: ProfileField
    text: str


@dataclass(frozen=True)
class OneOf:
    """Exact membership of a single-valued field in a set."""
    field: ProfileField
    values: tuple[str, ...]


@dataclass(frozen=True)
class Overlaps:
    """Match-ANY: the multi-valued field shares at least one element with values."""
    field: ProfileField
    values: tuple[str, ...]


@dataclass(frozen=True)
class Compare:
    field: ProfileField
    op: Comparison
    value: int


@dataclass(frozen=True)
class AnyOf:
    """OR group. An empty AnyOf matches nothing."""
    clauses: tuple["Predicate", ...]


@dataclass(frozen=True)
class AllOf:
    """AND group. An empty AllOf matches everything."""
    clauses: tuple["Predicate", ...]


Predicate = Contains | OneOf | Overlaps | Compare | AnyOf | AllOf

MATCH_ALL = AllOf(())


# ─── Builder ─────────────────────────────────────────────────────

def build_predicate(criteria: FilterCriteria) -> AllOf:
    """Translate validated criteria into an AND of the present clauses. Pure."""
    clauses: list[Predicate] = []

    if criteria.name_search:
        clauses.append(AnyOf(tuple(
            Contains(f, criteria.name_search) for f in SEARCH_FIELDS
        )))
    if criteria.cities:
        clauses.append(OneOf(ProfileField.CITY, tuple(sorted(criteria.cities))))
    if criteria.degrees:
        clauses.append(OneOf(ProfileField.DEGREE, tuple(sorted(criteria.degrees))))
    if criteria.specialties:
        clauses.append(Overlaps(
            ProfileField.SPECIALTIES, tuple(sorted(criteria.specialties)),
        ))
    if criteria.min_experience is not None:
        clauses.append(Compare(
            ProfileField.YEARS_OF_EXPERIENCE, Comparison.GTE, criteria.min_experience,
        ))
    if criteria.max_experience is not None:
        clauses.append(Compare(
            ProfileField.YEARS_OF_EXPERIENCE, Comparison.LTE, criteria.max_experience,
        ))

    return AllOf(tuple(clauses))


def like_pattern(text: str) -> str:
    """Lower-cased LIKE pattern matching text literally anywhere. Use with escape=LIKE_ESCAPE."""
    escaped = (
        text.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
