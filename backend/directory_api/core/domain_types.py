"""Domain Types — enums and bounds shared by every layer of the query engine.

Invariants:
    - ProfileField values are ORM/dataclass attribute names (snake_case)
    - SortField values are wire names (camelCase) — only these five are sortable
    - All numeric bounds live here — no magic numbers in validators or stores

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to raw strings
    - Wire names kept separate from attribute names: the API speaks camelCase,
      Python speaks snake_case (ADR: one translation point, schemas/)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ProfileId = NewType("ProfileId", int)


# ─── Bounds ──────────────────────────────────────────────────────

PAGE_MIN = 1
PAGE_MAX = 10_000
DEFAULT_PAGE = 1

LIMIT_MIN = 1
LIMIT_MAX = 100
DEFAULT_LIMIT = 10

EXPERIENCE_MIN = 0
EXPERIENCE_MAX = 100

SEARCH_MAX_LENGTH = 200
CITY_MAX_LENGTH = 100
DEGREE_MAX_LENGTH = 50
SPECIALTY_MAX_LENGTH = 100
MAX_MULTI_VALUES = 50

# Shown by the UI's range slider when the collection is empty
DEFAULT_EXPERIENCE_RANGE = (0, 20)


# ─── Enums ───────────────────────────────────────────────────────

class ProfileField(str, Enum):
    """Queryable attributes of a profile record."""
    ID = "id"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    CITY = "city"
    DEGREE = "degree"
    SPECIALTIES = "specialties"
    YEARS_OF_EXPERIENCE = "years_of_experience"
    PHONE_NUMBER = "phone_number"


TEXT_FIELDS = frozenset({
    ProfileField.FIRST_NAME,
    ProfileField.LAST_NAME,
    ProfileField.CITY,
    ProfileField.DEGREE,
})


class SortField(str, Enum):
    """Sortable fields, by wire name."""
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    CITY = "city"
    DEGREE = "degree"
    YEARS_OF_EXPERIENCE = "yearsOfExperience"

    @property
    def profile_field(self) -> ProfileField:
        return _SORT_TO_PROFILE_FIELD[self]


_SORT_TO_PROFILE_FIELD = {
    SortField.FIRST_NAME: ProfileField.FIRST_NAME,
    SortField.LAST_NAME: ProfileField.LAST_NAME,
    SortField.CITY: ProfileField.CITY,
    SortField.DEGREE: ProfileField.DEGREE,
    SortField.YEARS_OF_EXPERIENCE: ProfileField.YEARS_OF_EXPERIENCE,
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Comparison(str, Enum):
    """Range operators supported by the predicate tree."""
    GTE = "gte"
    LTE = "lte"
