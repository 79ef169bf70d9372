"""Business logic services."""

from geotracker.services.crawler import SiteCrawler
from geotracker.services.prompt_synthesizer import PromptSynthesizer
from geotracker.services.signals import extract_signals

__all__ = [
    "SiteCrawler",
    "PromptSynthesizer",
    "extract_signals",
]
