"""Facet Aggregator — distinct filter options and experience bounds, reduced in memory.

Invariants:
    - cities/degrees/specialties are deduplicated, lexicographically sorted, falsy values dropped
    - A row whose specialties value is not a list/tuple is skipped, never raises
    - experience_range falls back to DEFAULT_EXPERIENCE_RANGE when no integer values exist

Design Decisions:
    - Pull-and-reduce over server-side DISTINCT/unnest: at directory scale one
      projected scan is cheap and keeps every store adapter trivial (ADR: simplicity)
    - Input is plain mappings (store.all() rows): the aggregator never needs a
      full ProfileRecord, only four columns
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from directory_api.core.domain_types import DEFAULT_EXPERIENCE_RANGE, ProfileField

logger = logging.getLogger(__name__)

FACET_PROJECTION = (
    ProfileField.CITY,
    ProfileField.DEGREE,
    ProfileField.SPECIALTIES,
    ProfileField.YEARS_OF_EXPERIENCE,
)


@dataclass(frozen=True)
class ExperienceRange:
    min: int
    max: int


@dataclass(frozen=True)
class FacetOptions:
    cities: tuple[str, ...]
    degrees: tuple[str, ...]
    specialties: tuple[str, ...]
    experience_range: ExperienceRange

    def to_dict(self) -> dict:
        return {
            "cities": list(self.cities),
            "degrees": list(self.degrees),
            "specialties": list(self.specialties),
            "experienceRange": {
                "min": self.experience_range.min,
                "max": self.experience_range.max,
            },
        }


def aggregate_facets(rows: Iterable[Mapping[str, Any]]) -> FacetOptions:
    """Reduce rows to facet options. Pure, no IO."""
    cities: set[str] = set()
    degrees: set[str] = set()
    specialties: set[str] = set()
    years: list[int] = []
    skipped = 0

    for row in rows:
        city = row.get(ProfileField.CITY.value)
        if city and isinstance(city, str):
            cities.add(city)
        degree = row.get(ProfileField.DEGREE.value)
        if degree and isinstance(degree, str):
            degrees.add(degree)

        values = row.get(ProfileField.SPECIALTIES.value)
        if isinstance(values, (list, tuple)):
            specialties.update(v for v in values if v and isinstance(v, str))
        elif values is not None:
            skipped += 1

        experience = row.get(ProfileField.YEARS_OF_EXPERIENCE.value)
        if isinstance(experience, int) and not isinstance(experience, bool):
            years.append(experience)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed specialties value(s) in facets")

    return FacetOptions(
        cities=tuple(sorted(cities)),
        degrees=tuple(sorted(degrees)),
        specialties=tuple(sorted(specialties)),
        experience_range=_experience_range(years),
    )


def _experience_range(years: list[int]) -> ExperienceRange:
    if not years:
        return ExperienceRange(*DEFAULT_EXPERIENCE_RANGE)
    return ExperienceRange(min=min(years), max=max(years))
