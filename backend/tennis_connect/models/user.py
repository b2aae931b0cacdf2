from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tennis_connect.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    # "<scrypt hex digest>.<salt>", never serialized.
    password: Mapped[str] = mapped_column(String(256), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # player | coach
    role: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    # Public handle used in profile URLs.
    slug: Mapped[str] = mapped_column(String(160), nullable=False, unique=True, index=True)

    avatar: Mapped[str | None] = mapped_column(String(1024))
    cover: Mapped[str | None] = mapped_column(String(1024))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    player_profile = relationship("PlayerProfile", back_populates="user", uselist=False)
    coach_profile = relationship("CoachProfile", back_populates="user", uselist=False)
