"""Profile Query Schema — validates, sanitizes and bounds untrusted list/facet parameters.

Invariants:
    - Every parameter is optional; empty or whitespace-only values count as absent
    - Aliases (search, city, degree, specialty, minYears, maxYears, sortBy, sortDir)
      merge into canonical wire names before validation
    - page/limit/experience are clamped, not rejected; non-integers are rejected
    - Unknown sortField ⇒ no sort; unknown sortDirection ⇒ asc (never an error)
    - All failures are reported together as one QueryValidationError, before any store call

Design Decisions:
    - Pydantic "before" validators do clamping and sanitizing so the whole
      request is checked in one pass and errors aggregate for free
    - PydanticCustomError over ValueError: exact client-facing messages,
      no "Value error, " prefix leaking pydantic internals
    - Error "field" is the canonical wire name (loc by alias), never the Python name
"""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from directory_api.core.domain_types import (
    CITY_MAX_LENGTH, DEFAULT_LIMIT, DEFAULT_PAGE, DEGREE_MAX_LENGTH,
    EXPERIENCE_MAX, EXPERIENCE_MIN, LIMIT_MAX, LIMIT_MIN, MAX_MULTI_VALUES,
    PAGE_MAX, PAGE_MIN, SEARCH_MAX_LENGTH, SPECIALTY_MAX_LENGTH,
    SortDirection, SortField,
)
from directory_api.core.errors import FieldError, QueryValidationError
from directory_api.core.filter_criteria import FilterCriteria
from directory_api.core.sanitize_input import (
    clamp, parse_int, sanitize_text, sanitize_values, split_multi_value,
)

RawParams = Mapping[str, str | Sequence[str]]

# canonical wire name -> accepted aliases, in precedence order
PARAM_ALIASES: dict[str, tuple[str, ...]] = {
    "page": (),
    "limit": (),
    "nameSearch": ("search",),
    "cities": ("city",),
    "degrees": ("degree",),
    "specialties": ("specialty",),
    "minExperience": ("minYears",),
    "maxExperience": ("maxYears",),
    "sortField": ("sortBy",),
    "sortDirection": ("sortDir",),
    "includeFacets": (),
}

MULTI_VALUE_PARAMS = frozenset({"cities", "degrees", "specialties"})

_TRUE = frozenset({"true", "1", "yes"})
_FALSE = frozenset({"false", "0", "no"})


def collect_params(raw: RawParams) -> dict[str, str | list[str]]:
    """Merge aliases into canonical names and drop blank values.

    Multi-value params keep every value (canonical first, then aliases);
    single-value params keep the first non-blank one.
    """
    collected: dict[str, str | list[str]] = {}
    for canonical, aliases in PARAM_ALIASES.items():
        values: list[str] = []
        for name in (canonical, *aliases):
            values.extend(v for v in _as_list(raw.get(name)) if v.strip())
        if not values:
            continue
        collected[canonical] = values if canonical in MULTI_VALUE_PARAMS else values[0]
    return collected


def _as_list(value: str | Sequence[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [v for v in value if isinstance(v, str)]


class ProfileQuery(BaseModel):
    """Validated list/facet request. Build with parse_profile_query()."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    name_search: str | None = None
    cities: frozenset[str] = Field(default_factory=frozenset)
    degrees: frozenset[str] = Field(default_factory=frozenset)
    specialties: frozenset[str] = Field(default_factory=frozenset)
    min_experience: int | None = None
    max_experience: int | None = None
    sort_field: SortField | None = None
    sort_direction: SortDirection = SortDirection.ASC
    include_facets: bool = False

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v: object) -> int:
        return clamp(_to_int(v), PAGE_MIN, PAGE_MAX)

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: object) -> int:
        return clamp(_to_int(v), LIMIT_MIN, LIMIT_MAX)

    @field_validator("min_experience", "max_experience", mode="before")
    @classmethod
    def clamp_experience(cls, v: object) -> int | None:
        if v is None:
            return None
        return clamp(_to_int(v), EXPERIENCE_MIN, EXPERIENCE_MAX)

    @field_validator("name_search", mode="before")
    @classmethod
    def sanitize_search(cls, v: object) -> str | None:
        if v is None:
            return None
        text = _to_text(v, SEARCH_MAX_LENGTH)
        return sanitize_text(text) or None

    @field_validator("cities", mode="before")
    @classmethod
    def sanitize_cities(cls, v: object) -> frozenset[str]:
        return _to_value_set(v, CITY_MAX_LENGTH)

    @field_validator("degrees", mode="before")
    @classmethod
    def sanitize_degrees(cls, v: object) -> frozenset[str]:
        return _to_value_set(v, DEGREE_MAX_LENGTH)

    @field_validator("specialties", mode="before")
    @classmethod
    def sanitize_specialties(cls, v: object) -> frozenset[str]:
        return _to_value_set(v, SPECIALTY_MAX_LENGTH)

    @field_validator("sort_field", mode="before")
    @classmethod
    def allowed_sort_field(cls, v: object) -> SortField | None:
        if isinstance(v, SortField):
            return v
        if isinstance(v, str):
            try:
                return SortField(v.strip())
            except ValueError:
                pass
        return None

    @field_validator("sort_direction", mode="before")
    @classmethod
    def allowed_sort_direction(cls, v: object) -> SortDirection:
        if isinstance(v, SortDirection):
            return v
        if isinstance(v, str) and v.strip().lower() == SortDirection.DESC.value:
            return SortDirection.DESC
        return SortDirection.ASC

    @field_validator("include_facets", mode="before")
    @classmethod
    def parse_flag(cls, v: object) -> bool:
        if isinstance(v, bool):
            return v
        text = str(v).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise PydanticCustomError("bool_parsing", "must be true or false")

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(
            name_search=self.name_search,
            cities=self.cities,
            degrees=self.degrees,
            specialties=self.specialties,
            min_experience=self.min_experience,
            max_experience=self.max_experience,
            sort_field=self.sort_field,
            sort_direction=self.sort_direction,
            page=self.page,
            limit=self.limit,
        )


def parse_profile_query(raw: RawParams) -> ProfileQuery:
    """Validate raw query parameters. Raises QueryValidationError listing every bad field."""
    try:
        return ProfileQuery.model_validate(collect_params(raw))
    except ValidationError as exc:
        raise QueryValidationError([
            FieldError(
                field=str(e["loc"][0]) if e["loc"] else "query",
                message=e["msg"],
            )
            for e in exc.errors()
        ]) from exc


# ─── Coercion helpers ────────────────────────────────────────────

def _to_int(v: object) -> int:
    if isinstance(v, int) and not isinstance(v, bool):
        return v
    if isinstance(v, str):
        try:
            return parse_int(v)
        except ValueError:
            pass
    raise PydanticCustomError("int_parsing", "must be a whole number")


def _to_text(v: object, max_length: int) -> str:
    if not isinstance(v, str):
        raise PydanticCustomError("string_type", "must be text")
    if len(v) > max_length:
        raise PydanticCustomError(
            "string_too_long",
            "must be at most {max_length} characters",
            {"max_length": max_length},
        )
    return v


def _to_value_set(v: object, max_length: int) -> frozenset[str]:
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, (list, tuple, set, frozenset)) or not all(
        isinstance(p, str) for p in v
    ):
        raise PydanticCustomError("list_type", "must be a list of values")
    parts = [_to_text(p, max_length) for p in split_multi_value(v)]
    values = frozenset(sanitize_values(parts))
    if len(values) > MAX_MULTI_VALUES:
        raise PydanticCustomError(
            "too_many_values",
            "must contain at most {max_values} values",
            {"max_values": MAX_MULTI_VALUES},
        )
    return values
