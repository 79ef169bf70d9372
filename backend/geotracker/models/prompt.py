"""Prompt model for the library of test questions."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geotracker.database import Base


class Prompt(Base):
    """A question that is sent to AI providers to measure visibility."""

    __tablename__ = "prompts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    runs: Mapped[list["Run"]] = relationship(
        "Run", back_populates="prompt", cascade="all, delete-orphan"
    )
    memberships: Mapped[list["PromptCollection"]] = relationship(
        "PromptCollection", back_populates="prompt", cascade="all, delete-orphan"
    )


# Forward references
from geotracker.models.collection import PromptCollection  # noqa: E402
from geotracker.models.run import Run  # noqa: E402
