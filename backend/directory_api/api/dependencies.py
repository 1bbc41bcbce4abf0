"""API Dependencies — FastAPI providers for the record store and query service.

Invariants:
    - The connection pool handle comes from app.state (set by the lifespan), never a module global
    - No handle configured ⇒ StoreUnavailableError (503) before any work is done

Design Decisions:
    - Providers are tiny and overridable: tests swap get_profile_store for an
      InMemoryProfileStore via app.dependency_overrides
"""

from fastapi import Depends, Request

from directory_api.config import get_settings
from directory_api.core.errors import StoreUnavailableError
from directory_api.core.repository_protocols import ProfileStore
from directory_api.infrastructure.database import DatabaseSessionManager
from directory_api.infrastructure.profile_store import SqlProfileStore
from directory_api.schemas.profile_query import ProfileQuery, parse_profile_query
from directory_api.services.profile_query import ProfileQueryService


def get_db_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db_manager", None)


def get_profile_store(request: Request) -> ProfileStore:
    db_manager = get_db_manager(request)
    if db_manager is None:
        raise StoreUnavailableError("connect")
    return SqlProfileStore(db_manager)


def get_query_service(
    store: ProfileStore = Depends(get_profile_store),
) -> ProfileQueryService:
    return ProfileQueryService(
        store, timeout_seconds=get_settings().store_timeout_seconds,
    )


def get_profile_query(request: Request) -> ProfileQuery:
    """Validate the raw query string. Declared before the service so a bad
    request is rejected before any store handle is touched."""
    params = request.query_params
    return parse_profile_query({key: params.getlist(key) for key in params.keys()})
