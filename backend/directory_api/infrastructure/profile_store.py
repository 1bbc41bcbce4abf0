"""SQL Profile Store — translates predicate trees into bound SQLAlchemy statements.

Invariants:
    - Every literal reaches the database as a bound parameter; no user text is formatted into SQL
    - count() and query() compile the same predicate the same way
    - Overlaps matches native JSON arrays and legacy rows holding a JSON-encoded
      array string, the same rows normalize_specialties() decodes on read;
      any other stored shape matches nothing
    - Every call opens and releases its own session (DatabaseSessionManager.session)

Design Decisions:
    - Dialect-specific overlap: PostgreSQL uses the JSONB ?| operator (GIN-indexed
      for native arrays; legacy strings are decoded with #>> and cast to jsonb),
      SQLite a correlated json_each EXISTS over the decoded array. Same
      semantics, tests run on SQLite
    - Text search compiles to lower(col) LIKE :pattern ESCAPE '\\' with the pattern
      from core.predicates.like_pattern — wildcards in input match literally
    - Structural pattern matching over the frozen predicate nodes: unknown nodes
      fail loudly as InternalQueryError instead of silently matching everything
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import (
    Boolean, ColumnElement, String, Text, and_, case, cast, exists, false,
    func, literal_column, or_, select, true,
)
from sqlalchemy.dialects import postgresql

from directory_api.core.domain_types import (
    Comparison, ProfileField, ProfileId, TEXT_FIELDS,
)
from directory_api.core.errors import InternalQueryError
from directory_api.core.predicates import (
    AllOf, AnyOf, Compare, Contains, LIKE_ESCAPE, OneOf, Overlaps, Predicate,
    like_pattern,
)
from directory_api.core.profile_record import ProfileRecord, normalize_specialties
from directory_api.core.resolve_sort import SortKey
from directory_api.infrastructure.database import DatabaseSessionManager
from directory_api.models.profile import Profile

logger = logging.getLogger(__name__)

_COLUMNS = {
    ProfileField.ID: Profile.id,
    ProfileField.FIRST_NAME: Profile.first_name,
    ProfileField.LAST_NAME: Profile.last_name,
    ProfileField.CITY: Profile.city,
    ProfileField.DEGREE: Profile.degree,
    ProfileField.SPECIALTIES: Profile.specialties,
    ProfileField.YEARS_OF_EXPERIENCE: Profile.years_of_experience,
    ProfileField.PHONE_NUMBER: Profile.phone_number,
}

# text of a legacy row that can be decoded as a JSON array
_ENCODED_ARRAY = r"^\s*\[.*\]\s*$"


# ─── Compilation (pure) ──────────────────────────────────────────

def compile_predicate(predicate: Predicate, dialect_name: str) -> ColumnElement[bool]:
    """Compile a predicate tree into a SQLAlchemy boolean expression."""
    match predicate:
        case AllOf(clauses=clauses):
            if not clauses:
                return true()
            return and_(*(compile_predicate(c, dialect_name) for c in clauses))
        case AnyOf(clauses=clauses):
            if not clauses:
                return false()
            return or_(*(compile_predicate(c, dialect_name) for c in clauses))
        case Contains(field=field, text=text):
            column = _COLUMNS[field]
            if field not in TEXT_FIELDS:
                column = cast(column, String)
            return func.lower(column).like(like_pattern(text), escape=LIKE_ESCAPE)
        case OneOf(field=field, values=values):
            return _COLUMNS[field].in_(values)
        case Overlaps(field=field, values=values):
            return _compile_overlaps(_COLUMNS[field], values, dialect_name)
        case Compare(field=field, op=Comparison.GTE, value=value):
            return _COLUMNS[field] >= value
        case Compare(field=field, op=Comparison.LTE, value=value):
            return _COLUMNS[field] <= value
    raise InternalQueryError(f"Unsupported predicate node: {predicate!r}", "compile")


def _compile_overlaps(
    column: Any, values: tuple[str, ...], dialect_name: str,
) -> ColumnElement[bool]:
    if not values:
        return false()
    if dialect_name == "postgresql":
        return _compile_overlaps_postgresql(column, values)
    return _compile_overlaps_sqlite(column, values)


def _compile_overlaps_postgresql(
    column: Any, values: tuple[str, ...],
) -> ColumnElement[bool]:
    wanted = postgresql.array(values, type_=Text)
    native = and_(
        func.jsonb_typeof(column) == "array",
        column.op("?|", return_type=Boolean)(wanted),
    )
    # legacy rows: a JSONB string whose text is itself an encoded array
    inner = column.op("#>>", return_type=Text)(literal_column("'{}'"))
    legacy = and_(
        func.jsonb_typeof(column) == "string",
        case(
            (
                inner.regexp_match(_ENCODED_ARRAY),
                cast(inner, postgresql.JSONB).op("?|", return_type=Boolean)(wanted),
            ),
            else_=false(),
        ),
    )
    return or_(native, legacy)


def _compile_overlaps_sqlite(
    column: Any, values: tuple[str, ...],
) -> ColumnElement[bool]:
    inner = func.json_extract(column, "$")
    empty = literal_column("'[]'")
    source = case(
        (func.json_valid(column) == 0, empty),
        (func.json_type(column) == "array", column),
        (and_(func.json_type(column) == "text", func.json_valid(inner) == 1), inner),
        else_=empty,
    )
    elements = func.json_each(source).table_valued("value")
    return and_(
        func.json_type(source) == "array",
        exists(select(1).select_from(elements).where(elements.c.value.in_(values))),
    )


def compile_sort(sort: Sequence[SortKey]) -> list[ColumnElement]:
    clauses = []
    for key in sort:
        column = _COLUMNS[key.field]
        expr = func.lower(column) if key.case_insensitive else column
        clauses.append(expr.desc() if key.descending else expr.asc())
    return clauses


def to_profile_record(row: Profile) -> ProfileRecord:
    return ProfileRecord(
        id=ProfileId(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        city=row.city,
        degree=row.degree,
        specialties=normalize_specialties(row.specialties),
        years_of_experience=row.years_of_experience,
        phone_number=int(row.phone_number),
    )


# ─── Store ───────────────────────────────────────────────────────

class SqlProfileStore:
    """ProfileStore backed by the relational database."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    def _where(self, predicate: Predicate) -> ColumnElement[bool]:
        return compile_predicate(predicate, self._db.dialect_name)

    async def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(Profile).where(self._where(predicate))
        async with self._db.session("count") as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def query(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> list[ProfileRecord]:
        stmt = (
            select(Profile)
            .where(self._where(predicate))
            .order_by(*compile_sort(sort))
            .offset(offset)
            .limit(limit)
        )
        async with self._db.session("query") as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [to_profile_record(r) for r in rows]

    async def all(
        self,
        predicate: Predicate | None = None,
        projection: Sequence[ProfileField] | None = None,
    ) -> list[dict[str, Any]]:
        fields = tuple(projection) if projection else tuple(ProfileField)
        stmt = select(*(_COLUMNS[f] for f in fields)).order_by(Profile.id)
        if predicate is not None:
            stmt = stmt.where(self._where(predicate))
        async with self._db.session("all") as session:
            result = await session.execute(stmt)
            rows = result.all()
        logger.debug(f"Fetched {len(rows)} rows for aggregation")
        return [_row_to_dict(fields, row) for row in rows]


def _row_to_dict(fields: tuple[ProfileField, ...], row: Sequence[Any]) -> dict[str, Any]:
    data = {}
    for field, value in zip(fields, row):
        if field is ProfileField.SPECIALTIES:
            value = list(normalize_specialties(value))
        data[field.value] = value
    return data
