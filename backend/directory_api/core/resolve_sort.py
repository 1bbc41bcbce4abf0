"""Sort Resolver — maps the requested sort to a total, deterministic ordering.

Invariants:
    - Result always ends with id ascending (stable paging across repeated calls)
    - No sort requested ⇒ exactly (id ascending,)
    - Text fields sort case-insensitively
"""

from dataclasses import dataclass

from directory_api.core.domain_types import (
    ProfileField, SortDirection, SortField, TEXT_FIELDS,
)


@dataclass(frozen=True)
class SortKey:
    field: ProfileField
    descending: bool = False
    case_insensitive: bool = False


ID_ASCENDING = SortKey(ProfileField.ID)


def resolve_sort(
    sort_field: SortField | None, sort_direction: SortDirection,
) -> tuple[SortKey, ...]:
    """Resolve to an ordered tuple of sort keys. Pure."""
    if sort_field is None:
        return (ID_ASCENDING,)

    field = sort_field.profile_field
    primary = SortKey(
        field=field,
        descending=sort_direction is SortDirection.DESC,
        case_insensitive=field in TEXT_FIELDS,
    )
    return (primary, ID_ASCENDING)
