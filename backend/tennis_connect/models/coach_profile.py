from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tennis_connect.db.base import Base


class CoachProfile(Base):
    __tablename__ = "coach_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )

    title: Mapped[str] = mapped_column(String(128), nullable=False, default="Coach")
    location: Mapped[str] = mapped_column(String(128), nullable=False, default="Sydney")
    locations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    bio: Mapped[str | None] = mapped_column(Text)
    rating: Mapped[str | None] = mapped_column(String(16))
    reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rate: Mapped[str | None] = mapped_column(String(64))
    experience: Mapped[str | None] = mapped_column(String(128))
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    photos: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # Free-form weekly availability, shape owned by the client.
    schedule: Mapped[Any] = mapped_column(JSON, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(320))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user = relationship("User", back_populates="coach_profile")
