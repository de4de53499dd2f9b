"""OpenAI-compatible chat-completions client for the TextCompletionService port."""

from __future__ import annotations

import logging
from typing import Any

import requests

from carmarket.domain.errors import ExternalServiceError
from carmarket.infra.llm.config import LLMSettings
from carmarket.ports.text_completion import (
    CompletionRequest,
    CompletionResponse,
    TextCompletionService,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "text_completion"


class HttpTextCompletionService(TextCompletionService):
    """
    Calls ``POST {api_base}/chat/completions`` with a system and a user message.

    Every failure mode (timeout, connection error, non-2xx, unparsable body)
    surfaces as ExternalServiceError.
    """

    def __init__(self, settings: LLMSettings, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._http = session or requests.Session()

    def complete(self, request: CompletionRequest) -> CompletionResponse:
        url = f"{self._settings.api_base.rstrip('/')}/chat/completions"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.api_key}",
        }
        payload: dict[str, Any] = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

        try:
            resp = self._http.post(
                url,
                json=payload,
                headers=headers,
                timeout=self._settings.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            raise ExternalServiceError(
                SERVICE_NAME,
                f"Text completion timed out after {self._settings.timeout_seconds} seconds",
            ) from e
        except requests.RequestException as e:
            raise ExternalServiceError(SERVICE_NAME, f"Error contacting {url}: {e}") from e

        if not (200 <= resp.status_code < 300):
            raise ExternalServiceError(
                SERVICE_NAME,
                f"Text completion failed with HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError(SERVICE_NAME, "Text completion returned invalid JSON") from e

        text = _first_choice_content(data)

        logger.debug(
            "Text completion finished",
            extra={"model": self._settings.model, "has_text": text is not None},
        )

        return CompletionResponse(text=text)


def _first_choice_content(data: Any) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content.strip()
