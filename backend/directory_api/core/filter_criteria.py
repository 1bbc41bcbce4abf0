"""Filter Criteria — the validated, bounded form of one directory request.

Invariants:
    - Only constructed from validated input (schemas/profile_query.py)
    - Multi-value filters are frozensets: order and duplicates never matter
    - min_experience > max_experience is allowed and simply matches nothing

Design Decisions:
    - Frozen dataclass, no behaviour beyond read-only helpers: every component
      downstream (predicate, sort, pagination) is a pure function of it
"""

from dataclasses import dataclass, field

from directory_api.core.domain_types import (
    DEFAULT_LIMIT, DEFAULT_PAGE, SortDirection, SortField,
)


@dataclass(frozen=True)
class FilterCriteria:
    name_search: str | None = None
    cities: frozenset[str] = field(default_factory=frozenset)
    degrees: frozenset[str] = field(default_factory=frozenset)
    specialties: frozenset[str] = field(default_factory=frozenset)
    min_experience: int | None = None
    max_experience: int | None = None
    sort_field: SortField | None = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def has_filters(self) -> bool:
        """True when any clause would narrow the collection."""
        return bool(
            self.name_search
            or self.cities
            or self.degrees
            or self.specialties
            or self.min_experience is not None
            or self.max_experience is not None
        )

    def applied_filters(self) -> dict:
        """Echo of the filters actually applied, keyed by wire name. Absent ones omitted."""
        echo: dict = {}
        if self.name_search:
            echo["nameSearch"] = self.name_search
        if self.cities:
            echo["cities"] = sorted(self.cities)
        if self.degrees:
            echo["degrees"] = sorted(self.degrees)
        if self.specialties:
            echo["specialties"] = sorted(self.specialties)
        if self.min_experience is not None:
            echo["minExperience"] = self.min_experience
        if self.max_experience is not None:
            echo["maxExperience"] = self.max_experience
        return echo

    def applied_sort(self) -> dict | None:
        if self.sort_field is None:
            return None
        return {
            "field": self.sort_field.value,
            "direction": self.sort_direction.value,
        }
