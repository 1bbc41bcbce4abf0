"""Profile factory — builds ProfileRecords with sensible defaults for tests."""

from directory_api.core.profile_record import ProfileRecord


def make_record(
    id: int,
    first_name: str = "Ana",
    last_name: str = "Silva",
    city: str = "Austin",
    degree: str = "MD",
    specialties: tuple[str, ...] = (),
    years_of_experience: int = 5,
    phone_number: int = 5551234567,
) -> ProfileRecord:
    return ProfileRecord(
        id=id,
        first_name=first_name,
        last_name=last_name,
        city=city,
        degree=degree,
        specialties=specialties,
        years_of_experience=years_of_experience,
        phone_number=phone_number,
    )
