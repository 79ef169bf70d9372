"""LLM prompts for various tasks."""

from geotracker.prompts.bootstrap_generation import (
    BEST_PAGE_INSTRUCTION,
    BOOTSTRAP_OUTPUT_SCHEMA,
    BOOTSTRAP_PROMPT_HEADER,
    GENERIC_LOCATION_INSTRUCTION,
    LOCATION_INSTRUCTION,
    SUGGESTED_TERMS_INSTRUCTION,
)
from geotracker.prompts.prompt_generation import (
    SINGLE_PROMPT_CATEGORY,
    SINGLE_PROMPT_REQUEST,
    SINGLE_PROMPT_SYSTEM,
)

__all__ = [
    "BEST_PAGE_INSTRUCTION",
    "BOOTSTRAP_OUTPUT_SCHEMA",
    "BOOTSTRAP_PROMPT_HEADER",
    "GENERIC_LOCATION_INSTRUCTION",
    "LOCATION_INSTRUCTION",
    "SUGGESTED_TERMS_INSTRUCTION",
    "SINGLE_PROMPT_CATEGORY",
    "SINGLE_PROMPT_REQUEST",
    "SINGLE_PROMPT_SYSTEM",
]
