"""ORM Models — SQLAlchemy declarative models for the directory.

Invariants:
    - All models inherit from Base (db/base.py)
    - The query engine only reads these tables

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from directory_api.models.profile import Profile  # noqa: F401
