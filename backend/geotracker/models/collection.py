"""Collection model and the prompt/collection association table."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geotracker.database import Base


class Collection(Base):
    """A named group of prompts (e.g. the output of one bootstrap)."""

    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    memberships: Mapped[list["PromptCollection"]] = relationship(
        "PromptCollection", back_populates="collection", cascade="all, delete-orphan"
    )


class PromptCollection(Base):
    """Membership of a prompt in a collection."""

    __tablename__ = "prompt_collections"

    prompt_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prompts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
    )

    prompt: Mapped["Prompt"] = relationship("Prompt", back_populates="memberships")
    collection: Mapped["Collection"] = relationship("Collection", back_populates="memberships")


# Forward reference
from geotracker.models.prompt import Prompt  # noqa: E402
