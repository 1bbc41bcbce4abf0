"""Profile ORM — one professional-profile row in the directory.

Invariants:
    - id is an integer primary key assigned by the database
    - first_name, last_name, city, degree are non-nullable text
    - years_of_experience is constrained to 0–100
    - specialties is JSON (JSONB on PostgreSQL); rows written by an older schema
      revision may hold a JSON-encoded string instead of an array — readers
      normalize (core/profile_record.py), this model does not

Design Decisions:
    - One index per filterable/sortable column, GIN on specialties for the
      ?| overlap operator (PostgreSQL only; other dialects ignore it)
    - JSON().with_variant(JSONB): same model runs on SQLite for tests
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, BigInteger, CheckConstraint, DateTime, Index, Integer, Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from directory_api.db.base import Base

SpecialtiesType = JSON().with_variant(JSONB(), "postgresql")


class Profile(Base):
    """Directory entry — read-only from the query engine's point of view."""
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "years_of_experience BETWEEN 0 AND 100",
            name="years_of_experience_range",
        ),
        Index("profiles_city_idx", "city"),
        Index("profiles_degree_idx", "degree"),
        Index("profiles_years_of_experience_idx", "years_of_experience"),
        Index("profiles_first_name_idx", "first_name"),
        Index("profiles_last_name_idx", "last_name"),
        Index(
            "profiles_specialties_gin_idx", "specialties",
            postgresql_using="gin",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(Text, nullable=False)
    degree: Mapped[str] = mapped_column(Text, nullable=False)
    specialties: Mapped[list] = mapped_column(
        SpecialtiesType, nullable=False, default=list,
    )
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False)
    phone_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
