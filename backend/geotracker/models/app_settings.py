"""Single-row settings model holding the tracked domain and provider keys."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from geotracker.database import Base

SETTINGS_ROW_ID = 1


class AppSettings(Base):
    """User-editable settings. There is only ever one row (id=1)."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    tracked_domain: Mapped[str] = mapped_column(String(255), default="")

    # Provider API keys
    openai_api_key: Mapped[str | None] = mapped_column(String(512), nullable=True)
    anthropic_api_key: Mapped[str | None] = mapped_column(String(512), nullable=True)
    perplexity_api_key: Mapped[str | None] = mapped_column(String(512), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
