from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    system_prompt: str
    user_prompt: str
    temperature: float = 0.7
    max_tokens: int = 300


@dataclass(frozen=True, slots=True)
class CompletionResponse:
    text: str | None  # None when the service answered without content


class TextCompletionService(ABC):
    """
    Port for an opaque text-completion (LLM) service.

    Contract:
        - Calls are bounded by a timeout owned by the implementation
        - Transport failures, timeouts and non-2xx answers raise
          ExternalServiceError; callers apply their own fallback
    """

    @abstractmethod
    def complete(self, request: CompletionRequest) -> CompletionResponse: ...
