"""Run model storing one provider response and its extracted signals."""

import json
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geotracker.database import Base


class Run(Base):
    """The answer of one provider/model to one prompt."""

    __tablename__ = "runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prompt_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prompts.id", ondelete="CASCADE"),
        index=True,
    )
    provider: Mapped[str] = mapped_column(String(50))
    model: Mapped[str] = mapped_column(String(100))
    response: Mapped[str] = mapped_column(Text)
    signals: Mapped[str] = mapped_column(Text)  # JSON-encoded Signal
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    prompt: Mapped["Prompt"] = relationship("Prompt", back_populates="runs")

    def signals_dict(self) -> dict:
        """Decode the stored signal record."""
        return json.loads(self.signals)


# Forward reference
from geotracker.models.prompt import Prompt  # noqa: E402
