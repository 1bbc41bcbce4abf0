"""In-Memory Profile Store — evaluates the predicate tree directly over Python records.

Invariants:
    - Same observable semantics as SqlProfileStore for every predicate node
    - Records are normalized on construction (from_rows); evaluation never sees raw storage shapes
    - Immutable after construction: safe to share across concurrent requests

Design Decisions:
    - Exists so the engine is testable and embeddable without a database
    - Multi-key ordering via repeated stable sorts, last key first
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from directory_api.core.domain_types import Comparison, ProfileField, ProfileId
from directory_api.core.errors import InternalQueryError
from directory_api.core.predicates import (
    AllOf, AnyOf, Compare, Contains, OneOf, Overlaps, Predicate,
)
from directory_api.core.profile_record import ProfileRecord, normalize_specialties
from directory_api.core.resolve_sort import SortKey


def matches(predicate: Predicate, record: ProfileRecord) -> bool:
    """Evaluate a predicate against one record. Pure."""
    match predicate:
        case AllOf(clauses=clauses):
            return all(matches(c, record) for c in clauses)
        case AnyOf(clauses=clauses):
            return any(matches(c, record) for c in clauses)
        case Contains(field=field, text=text):
            return text.lower() in str(getattr(record, field.value)).lower()
        case OneOf(field=field, values=values):
            return getattr(record, field.value) in values
        case Overlaps(field=field, values=values):
            return not set(values).isdisjoint(getattr(record, field.value))
        case Compare(field=field, op=Comparison.GTE, value=value):
            return getattr(record, field.value) >= value
        case Compare(field=field, op=Comparison.LTE, value=value):
            return getattr(record, field.value) <= value
    raise InternalQueryError(f"Unsupported predicate node: {predicate!r}", "evaluate")


def sort_records(
    records: Iterable[ProfileRecord], sort: Sequence[SortKey],
) -> list[ProfileRecord]:
    ordered = list(records)
    for key in reversed(sort):
        ordered.sort(
            key=lambda r, k=key: _sort_value(r, k), reverse=key.descending,
        )
    return ordered


def _sort_value(record: ProfileRecord, key: SortKey) -> Any:
    value = getattr(record, key.field.value)
    return value.lower() if key.case_insensitive else value


def record_from_row(row: Mapping[str, Any]) -> ProfileRecord:
    """Build a record from a raw storage row, normalizing specialties."""
    return ProfileRecord(
        id=ProfileId(int(row["id"])),
        first_name=row["first_name"],
        last_name=row["last_name"],
        city=row["city"],
        degree=row["degree"],
        specialties=normalize_specialties(row.get("specialties")),
        years_of_experience=int(row["years_of_experience"]),
        phone_number=int(row.get("phone_number", 0)),
    )


class InMemoryProfileStore:
    """ProfileStore over a fixed tuple of records."""

    def __init__(self, records: Iterable[ProfileRecord] = ()):
        self._records = tuple(sorted(records, key=lambda r: r.id))

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "InMemoryProfileStore":
        return cls(record_from_row(row) for row in rows)

    def _select(self, predicate: Predicate | None) -> list[ProfileRecord]:
        if predicate is None:
            return list(self._records)
        return [r for r in self._records if matches(predicate, r)]

    async def count(self, predicate: Predicate) -> int:
        return len(self._select(predicate))

    async def query(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> list[ProfileRecord]:
        ordered = sort_records(self._select(predicate), sort)
        return ordered[offset:offset + limit]

    async def all(
        self,
        predicate: Predicate | None = None,
        projection: Sequence[ProfileField] | None = None,
    ) -> list[dict[str, Any]]:
        fields = tuple(projection) if projection else tuple(ProfileField)
        return [
            {
                f.value: (
                    list(r.specialties) if f is ProfileField.SPECIALTIES
                    else getattr(r, f.value)
                )
                for f in fields
            }
            for r in self._select(predicate)
        ]
