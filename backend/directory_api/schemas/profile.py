"""Profile Schemas — Pydantic response models for the directory list and facet endpoints.

Invariants:
    - Field names are snake_case in Python, camelCase on the wire (alias_generator)
    - ProfileSearchResponse.sort and .facets are None when not applied/requested;
      routes serialize with exclude_none so they are absent, not null
    - filters echo post-validation values only

Design Decisions:
    - from_attributes=True: ProfileOut validates straight from the core
      ProfileRecord dataclass, no hand-written mapping
    - Separate from profile_query.py: request validation and response shape
      change for different reasons
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class ProfileOut(_WireModel):
    """A directory entry as rendered by the list UI."""
    id: int
    first_name: str
    last_name: str
    city: str
    degree: str
    specialties: list[str] = []
    years_of_experience: int
    phone_number: int


class PaginationOut(_WireModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_more: bool


class AppliedFilters(_WireModel):
    """Echo of the filters the query actually used."""
    name_search: str | None = None
    cities: list[str] | None = None
    degrees: list[str] | None = None
    specialties: list[str] | None = None
    min_experience: int | None = None
    max_experience: int | None = None


class AppliedSort(_WireModel):
    field: str
    direction: str


class ExperienceRangeOut(_WireModel):
    min: int
    max: int


class FacetOptionsOut(_WireModel):
    """Filter-control options: distinct values plus experience bounds."""
    cities: list[str] = []
    degrees: list[str] = []
    specialties: list[str] = []
    experience_range: ExperienceRangeOut


class ProfileSearchResponse(_WireModel):
    """Envelope for GET /api/v1/profiles."""
    data: list[ProfileOut] = []
    pagination: PaginationOut
    filters: AppliedFilters = AppliedFilters()
    sort: AppliedSort | None = None
    facets: FacetOptionsOut | None = None
