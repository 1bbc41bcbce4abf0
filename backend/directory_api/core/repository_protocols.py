"""Boundary Protocols — the record-store contract between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every store consumes the predicate tree; none accepts query text
    - count() and query() given the same predicate describe the same rows
      (best-effort snapshot, not atomic)
    - all() rows are plain dicts keyed by ProfileField value, specialties normalized

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the pure functions that
      build the arguments (predicate, sort, offset) are never async themselves —
      the service orchestrates the async calls around the pure logic
"""

from collections.abc import Sequence
from typing import Any, Protocol

from directory_api.core.domain_types import ProfileField
from directory_api.core.predicates import Predicate
from directory_api.core.profile_record import ProfileRecord
from directory_api.core.resolve_sort import SortKey


class ProfileStore(Protocol):
    """Contract for read access to the profile collection — implemented by shell."""
    async def count(self, predicate: Predicate) -> int: ...
    async def query(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> list[ProfileRecord]: ...
    async def all(
        self,
        predicate: Predicate | None = None,
        projection: Sequence[ProfileField] | None = None,
    ) -> list[dict[str, Any]]: ...
