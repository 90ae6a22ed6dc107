"""SQLAlchemy model for advocate profiles."""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from advocate_directory.db.session import Base


class Advocate(Base):
    """Healthcare advocate profile listed in the directory.

    Rows are inserted once by the seed script and only read afterwards.
    ``id`` grows with insertion order, which lets it double as the cursor token.
    """

    __tablename__ = "advocates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(Text, nullable=False)
    degree: Mapped[str] = mapped_column(Text, nullable=False)
    # Free-text tags; order is kept but carries no meaning for queries.
    specialties: Mapped[list[str]] = mapped_column(
        "payload", JSON, nullable=False, default=list
    )
    years_of_experience: Mapped[int] = mapped_column(Integer, nullable=False)
    phone_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.current_timestamp()
    )

    __table_args__ = (
        Index("idx_advocates_first_name", "first_name"),
        Index("idx_advocates_last_name", "last_name"),
        Index("idx_advocates_city", "city"),
        Index("idx_advocates_degree", "degree"),
        Index("idx_advocates_years_experience", "years_of_experience"),
        Index("idx_advocates_created_at", "created_at"),
        Index("idx_advocates_name_search", "first_name", "last_name"),
        Index("idx_advocates_location_experience", "city", "years_of_experience"),
    )
