"""SQLAlchemy models."""

from geotracker.models.app_settings import AppSettings
from geotracker.models.collection import Collection, PromptCollection
from geotracker.models.prompt import Prompt
from geotracker.models.run import Run

__all__ = [
    "AppSettings",
    "Prompt",
    "Collection",
    "PromptCollection",
    "Run",
]
