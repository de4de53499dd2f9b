from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from carmarket.domain.assistant import ExtractedQuery
from carmarket.domain.errors import ExternalServiceError
from carmarket.domain.filters import parse_filter_spec
from carmarket.domain.metadata import MetadataKind, Vocabulary
from carmarket.domain.query_understanding import extract_query_keywords
from carmarket.ports.metadata_vocabulary import MetadataVocabulary
from carmarket.ports.text_completion import CompletionRequest, TextCompletionService

logger = logging.getLogger(__name__)

# Keys the completion service may return; anything else is discarded
FACET_KEYS = (
    "query",
    "make",
    "model",
    "yearMin",
    "yearMax",
    "priceMin",
    "priceMax",
    "mileageMax",
    "fuelType",
    "transmission",
    "bodyType",
    "condition",
    "location",
)

DEFAULT_MODEL_CONFIDENCE = 0.7

SYSTEM_PROMPT = """You extract car search filters from a shopper's message.
Answer with a single JSON object and nothing else. Allowed keys:
{keys}, features, extractedKeywords, confidence.
- Prices and mileage are plain numbers, years are 4-digit integers.
- fuelType must be one of: {fuel_types}
- transmission must be one of: {transmissions}
- bodyType must be one of: {body_types}
- condition must be one of: {conditions}
- features is a list drawn from: {features}
- extractedKeywords lists the exact words of the message that produced each filter.
- confidence is a number between 0 and 1.
Omit keys the message does not mention."""


@dataclass(frozen=True, slots=True)
class ExtractListingQueryRequest:
    utterance: str


class ExtractListingQuery:
    """
    Turns an assistant utterance into an ExtractedQuery.

    With a completion service, the service is asked for a JSON object shaped
    like the search query parameters. Without one, keyword rules are used.
    The result always goes through parse_filter_spec, so the facets match
    what ``GET /search`` would accept. A failing or malformed completion
    falls back to a free-text reading with zero confidence.
    """

    def __init__(
        self,
        metadata_vocabulary: MetadataVocabulary,
        text_completion_service: TextCompletionService | None = None,
    ) -> None:
        self._vocabulary = metadata_vocabulary
        self._completion = text_completion_service

    def execute(self, request: ExtractListingQueryRequest) -> ExtractedQuery:
        vocabulary = self._vocabulary.snapshot()

        if self._completion is None:
            return extract_query_keywords(request.utterance, vocabulary)

        try:
            response = self._completion.complete(
                CompletionRequest(
                    system_prompt=_system_prompt(vocabulary),
                    user_prompt=request.utterance,
                    temperature=0.0,
                    max_tokens=300,
                )
            )
        except ExternalServiceError as e:
            logger.warning(
                "Query extraction failed, using free-text fallback",
                extra={"error": e.message},
            )
            return ExtractedQuery.free_text(request.utterance)

        payload = _load_json_object(response.text)
        if payload is None:
            logger.warning(
                "Query extraction returned malformed output, using free-text fallback",
                extra={"output": response.text},
            )
            return ExtractedQuery.free_text(request.utterance)

        return _to_extracted_query(payload, vocabulary)


def _system_prompt(vocabulary: Vocabulary) -> str:
    def listed(kind: MetadataKind) -> str:
        return ", ".join(sorted(vocabulary.values(kind))) or "(none)"

    return SYSTEM_PROMPT.format(
        keys=", ".join(FACET_KEYS),
        fuel_types=listed(MetadataKind.FUEL_TYPE),
        transmissions=listed(MetadataKind.TRANSMISSION),
        body_types=listed(MetadataKind.BODY_TYPE),
        conditions=listed(MetadataKind.CONDITION),
        features=listed(MetadataKind.CAR_FEATURE),
    )


def _load_json_object(text: str | None) -> dict[str, Any] | None:
    if not text:
        return None

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`").strip()
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]

    try:
        payload = json.loads(cleaned)
    except ValueError:
        return None

    return payload if isinstance(payload, dict) else None


def _to_extracted_query(payload: dict[str, Any], vocabulary: Vocabulary) -> ExtractedQuery:
    raw: dict[str, Any] = {}
    for key in FACET_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            # Models sometimes answer "make": ["Honda", "Toyota"]; keep the first
            value = next((item for item in value if isinstance(item, str)), None)
        if value is None:
            continue
        if isinstance(value, float) and value.is_integer():
            # JSON numbers like 2020.0 still name an integer year or mileage
            value = int(value)
        raw[key] = str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value

    parsed = parse_filter_spec(raw)

    features = tuple(
        feature.strip().lower()
        for feature in _string_list(payload.get("features"))
        if vocabulary.allows(MetadataKind.CAR_FEATURE, feature)
    )
    keywords = tuple(_string_list(payload.get("extractedKeywords")))

    confidence = payload.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        confidence = min(1.0, max(0.0, float(confidence)))
    elif parsed.spec.facets() or features:
        confidence = DEFAULT_MODEL_CONFIDENCE
    else:
        confidence = 0.0

    return ExtractedQuery(
        filters=parsed.spec,
        features=features,
        extracted_keywords=keywords,
        confidence=confidence,
    )


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]
