"""Profile Query Service — runs count + page against a ProfileStore and assembles the envelope.

Invariants:
    - Input is already-validated FilterCriteria: no store call happens for a bad request
    - count() and query() receive the identical predicate; pagination metadata is
      computed from that count
    - Unfiltered facets run concurrently with the count/page pair, never inside it;
      when one side fails the other is cancelled before the error propagates
    - Store round trips are bounded by timeout_seconds ⇒ StoreUnavailableError
    - No mutable state: one instance may serve concurrent requests

Design Decisions:
    - Impureim sandwich: pure core builds predicate/sort/offset, this class does
      the awaits, pure core builds PageResult/FacetOptions, schemas shape the wire
    - No retries: a failed store call surfaces to the caller, who may retry
    - Cancellation is never swallowed: asyncio.CancelledError propagates and the
      store's session context releases its connection
"""

import asyncio
import logging

from directory_api.core.errors import StoreUnavailableError
from directory_api.core.facets import FACET_PROJECTION, FacetOptions, aggregate_facets
from directory_api.core.filter_criteria import FilterCriteria
from directory_api.core.pagination import PageResult, build_page, compute_offset
from directory_api.core.predicates import build_predicate
from directory_api.core.profile_record import ProfileRecord
from directory_api.core.repository_protocols import ProfileStore
from directory_api.core.resolve_sort import resolve_sort
from directory_api.schemas.profile import (
    AppliedFilters, AppliedSort, FacetOptionsOut, PaginationOut, ProfileOut,
    ProfileSearchResponse,
)

logger = logging.getLogger(__name__)


class ProfileQueryService:
    """Query executor and response assembler for the directory."""

    def __init__(self, store: ProfileStore, timeout_seconds: float | None = None):
        self.store = store
        self.timeout_seconds = timeout_seconds

    async def search(
        self, criteria: FilterCriteria, include_facets: bool = False,
    ) -> ProfileSearchResponse:
        """Fetch one page (and optionally unfiltered facets) for the criteria."""
        if include_facets:
            page, facets = await self._page_with_facets(criteria)
        else:
            page, facets = await self.fetch_page(criteria), None

        logger.info(
            f"Profile query matched {page.total_count} record(s)",
            extra={"total_count": page.total_count},
        )
        return assemble_response(criteria, page, facets)

    async def _page_with_facets(
        self, criteria: FilterCriteria,
    ) -> tuple[PageResult[ProfileRecord], FacetOptions]:
        """Run the page and the unfiltered facets side by side; if either fails
        or the caller is cancelled, the other is cancelled and awaited."""
        tasks = (
            asyncio.create_task(self.fetch_page(criteria)),
            asyncio.create_task(self.facets()),
        )
        try:
            page, facets = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return page, facets

    async def fetch_page(self, criteria: FilterCriteria) -> PageResult[ProfileRecord]:
        predicate = build_predicate(criteria)
        sort = resolve_sort(criteria.sort_field, criteria.sort_direction)
        offset = compute_offset(criteria.page, criteria.limit)

        async def count_then_page() -> PageResult[ProfileRecord]:
            total_count = await self.store.count(predicate)
            items = await self.store.query(predicate, sort, offset, criteria.limit)
            return build_page(items, criteria.page, criteria.limit, total_count)

        return await self._bounded(count_then_page(), "search")

    async def facets(self, criteria: FilterCriteria | None = None) -> FacetOptions:
        """Facet options over the whole collection, or over the criteria's matches."""
        predicate = (
            build_predicate(criteria)
            if criteria is not None and criteria.has_filters
            else None
        )
        rows = await self._bounded(
            self.store.all(predicate, FACET_PROJECTION), "facets",
        )
        return aggregate_facets(rows)

    async def _bounded(self, coro, operation: str):
        if self.timeout_seconds is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Store {operation} exceeded {self.timeout_seconds}s",
                extra={"error_code": "STORE_UNAVAILABLE"},
            )
            raise StoreUnavailableError(operation) from e


def assemble_response(
    criteria: FilterCriteria,
    page: PageResult[ProfileRecord],
    facets: FacetOptions | None = None,
) -> ProfileSearchResponse:
    """Merge page data, pagination metadata and the applied-filter echo. Pure."""
    sort = criteria.applied_sort()
    return ProfileSearchResponse(
        data=[ProfileOut.model_validate(r) for r in page.items],
        pagination=PaginationOut.model_validate(page.pagination()),
        filters=AppliedFilters.model_validate(criteria.applied_filters()),
        sort=AppliedSort.model_validate(sort) if sort else None,
        facets=FacetOptionsOut.model_validate(facets.to_dict()) if facets else None,
    )
