"""Profile Record — the read model of one directory entry, plus the specialty normalizer.

Invariants:
    - ProfileRecord.specialties is always a tuple of non-empty, distinct strings
    - normalize_specialties() never raises, whatever shape the store hands back
    - Order of specialties is preserved (first occurrence wins on duplicates)

Design Decisions:
    - Tagged-variant read path: an earlier schema revision persisted the array as a
      JSON-encoded string ('["A","B"]'). That shape is decoded; every other
      malformed shape collapses to () instead of failing the whole response
    - Frozen dataclass: records are shared between concurrent tasks without copying
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from directory_api.core.domain_types import ProfileId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileRecord:
    """One directory entry as returned by a ProfileStore."""
    id: ProfileId
    first_name: str
    last_name: str
    city: str
    degree: str
    specialties: tuple[str, ...]
    years_of_experience: int
    phone_number: int


def normalize_specialties(raw: Any) -> tuple[str, ...]:
    """Coerce a stored specialties value into a clean tuple. Pure, never raises."""
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.debug("Discarding non-JSON specialties value")
            return ()
        if not isinstance(decoded, list):
            return ()
        raw = decoded
    if not isinstance(raw, (list, tuple)):
        return ()

    seen: dict[str, None] = {}
    for item in raw:
        if isinstance(item, str):
            item = item.strip()
            if item:
                seen.setdefault(item, None)
    return tuple(seen)
