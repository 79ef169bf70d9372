"""Repository implementations for data access."""

from geotracker.repositories.sql import (
    CollectionRepository,
    PromptRepository,
    RunRepository,
    SettingsRepository,
)

__all__ = [
    "SettingsRepository",
    "PromptRepository",
    "CollectionRepository",
    "RunRepository",
]
