"""Service test fixtures — a recording in-memory store and the service over it.

Invariants:
    - Service tests never touch a database: InMemoryProfileStore carries the semantics
    - Fake stores (tests/fake_stores.py) implement the ProfileStore protocol and
      record what they were asked

Design Decisions:
    - Fakes over mocks: the protocol is four small async methods, a class is
      clearer than patching and asserts on real arguments
"""

import pytest

from directory_api.services.profile_query import ProfileQueryService
from tests.fake_stores import RecordingStore


@pytest.fixture
def store(directory_records):
    return RecordingStore(directory_records)


@pytest.fixture
def service(store):
    return ProfileQueryService(store)
