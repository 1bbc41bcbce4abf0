"""Profile Routes — paginated directory listing and filter-option facets.

Invariants:
    - Query parameters are validated (get_profile_query) before the store is resolved
    - Responses serialize with camelCase keys; absent sort/facets/filters are omitted
    - Routes hold no query logic: they delegate to ProfileQueryService

Design Decisions:
    - Raw query string parsed by our own schema rather than FastAPI Query(...)
      params: aliases, comma lists and clamping need one aggregated pass
    - /filters accepts the same filter parameters for context-sensitive facets;
      with none it aggregates the whole collection
"""

import logging

from fastapi import APIRouter, Depends

from directory_api.api.dependencies import get_profile_query, get_query_service
from directory_api.schemas.profile import FacetOptionsOut, ProfileSearchResponse
from directory_api.schemas.profile_query import ProfileQuery
from directory_api.services.profile_query import ProfileQueryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.get(
    "", response_model=ProfileSearchResponse, response_model_exclude_none=True,
)
async def list_profiles(
    query: ProfileQuery = Depends(get_profile_query),
    service: ProfileQueryService = Depends(get_query_service),
):
    """List profiles matching the filters, one page at a time."""
    return await service.search(
        query.to_criteria(), include_facets=query.include_facets,
    )


@router.get("/filters", response_model=FacetOptionsOut)
async def list_filter_options(
    query: ProfileQuery = Depends(get_profile_query),
    service: ProfileQueryService = Depends(get_query_service),
):
    """Distinct cities/degrees/specialties and the experience range."""
    facets = await service.facets(query.to_criteria())
    return FacetOptionsOut.model_validate(facets.to_dict())
