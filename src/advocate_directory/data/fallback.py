"""Fixed advocate dataset served when no database is configured.

The same records seed a fresh database (see ``advocate_directory.scripts.seed``).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Final

from advocate_directory.data.records import AdvocateRecord

_EPOCH: Final = datetime(2024, 1, 1, 9, 0, 0)

_DEGREE_TITLES: Final[dict[str, str]] = {
    "MD": "physician",
    "PhD": "psychologist",
    "MSW": "social worker",
}

# (first, last, city, degree, years, phone, specialties)
_BASE_ROWS: Final = (
    ("John", "Doe", "New York", "MD", 10, 5551234567, ("Bipolar", "LGBTQ", "Medication")),
    ("Jane", "Smith", "Los Angeles", "PhD", 8, 5559876543, ("Anxiety", "Depression", "Stress")),
    ("Alice", "Johnson", "Chicago", "MSW", 5, 5554567890, ("Grief", "Relationships", "Trauma")),
    ("Michael", "Brown", "Houston", "MD", 12, 5556543210, ("PTSD", "Personality", "Growth", "Substance")),
    ("Emily", "Davis", "Phoenix", "PhD", 7, 5553210987, ("Anxiety", "Sleep", "OCD")),
    ("Chris", "Martinez", "Philadelphia", "MSW", 9, 5557890123, ("Pediatrics", "Women", "Pain")),
    ("Jessica", "Taylor", "San Antonio", "MD", 11, 5554561234, ("Nutrition", "Eating", "Diabetes")),
    ("David", "Harris", "San Diego", "PhD", 6, 5557896543, ("Coaching", "ADHD", "Learning")),
    ("Laura", "Clark", "Dallas", "MSW", 4, 5550123456, ("Anxiety", "Depression", "Trauma")),
    ("Daniel", "Lewis", "San Jose", "MD", 13, 5553217654, ("Schizophrenia", "Bipolar", "Medication")),
    ("Sarah", "Lee", "Austin", "PhD", 10, 5551238765, ("Abuse", "Relationships", "Women")),
    ("James", "King", "Jacksonville", "MSW", 5, 5556540987, ("Substance", "Suicide", "Stress")),
    ("Megan", "Green", "San Francisco", "MD", 14, 5559873456, ("Anxiety", "Pain", "Sleep")),
    ("Joshua", "Walker", "Columbus", "PhD", 9, 5556781234, ("Growth", "Coaching", "LGBTQ")),
    ("Amanda", "Hall", "Fort Worth", "MSW", 3, 5559872345, ("Pediatrics", "Learning", "ADHD")),
)


def _profile_image_url(first_name: str, last_name: str) -> str:
    seed = f"{first_name}-{last_name}".lower()
    return f"https://i.pravatar.cc/150?u={seed}"


def _bio(first_name: str, degree: str, years: int, specialties: tuple[str, ...]) -> str:
    focus = specialties[0].lower() if specialties else "mental health"
    title = _DEGREE_TITLES.get(degree, "clinician")
    return (
        f"{first_name} is a licensed {title} with {years} years of experience "
        f"specializing in {focus}. They have dedicated their career to helping "
        "individuals navigate life's challenges and achieve mental wellness."
    )


def _build() -> tuple[AdvocateRecord, ...]:
    records = []
    for index, (first, last, city, degree, years, phone, tags) in enumerate(_BASE_ROWS, start=1):
        records.append(
            AdvocateRecord(
                id=index,
                first_name=first,
                last_name=last,
                city=city,
                degree=degree,
                specialties=tags,
                years_of_experience=years,
                phone_number=phone,
                profile_image_url=_profile_image_url(first, last),
                bio=_bio(first, degree, years, tags),
                # Creation time grows with id so id order and createdAt order agree.
                created_at=_EPOCH + timedelta(days=index),
            )
        )
    return tuple(records)


FALLBACK_ADVOCATES: Final[tuple[AdvocateRecord, ...]] = _build()
