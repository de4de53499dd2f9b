from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LLMSettings:
    api_base: str
    api_key: str
    model: str
    timeout_seconds: float

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


def llm_settings() -> LLMSettings:
    """
    Text-completion settings from the environment.

    An empty LLM_API_KEY disables the service: the assistant then runs on
    keyword extraction and fixed templates only.
    """
    return LLMSettings(
        api_base=os.getenv("LLM_API_BASE", "https://api.openai.com/v1"),
        api_key=os.getenv("LLM_API_KEY", ""),
        model=os.getenv("LLM_MODEL", "gpt-3.5-turbo"),
        timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "10")),
    )


def assistant_confidence_threshold() -> float:
    """Minimum extraction confidence at which extracted facets are trusted."""
    threshold = float(os.getenv("ASSISTANT_CONFIDENCE_THRESHOLD", "0.5"))

    if not 0.0 <= threshold <= 1.0:
        raise RuntimeError("ASSISTANT_CONFIDENCE_THRESHOLD must be between 0 and 1")

    return threshold
