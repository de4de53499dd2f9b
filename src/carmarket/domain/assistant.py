from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from carmarket.domain.filters import FilterSpec
from carmarket.domain.listing import Listing

MAX_SUGGESTIONS = 4
MAX_LISTING_ACTIONS = 5


class UserIntent(str, Enum):
    CAR_LISTING = "car_listing"
    CAR_SPECS = "car_specs"
    CAR_COMPARE = "car_compare"
    FAQ = "faq"


@dataclass(frozen=True, slots=True)
class ExtractedQuery:
    """
    Structured reading of one user utterance.

    Produced once per utterance and consumed by the search right away.
    ``filters`` went through the same parser as HTTP query parameters.
    """

    filters: FilterSpec
    features: tuple[str, ...] = ()
    extracted_keywords: tuple[str, ...] = ()
    confidence: float = 0.0

    @classmethod
    def free_text(cls, utterance: str) -> ExtractedQuery:
        """Fallback reading: the raw utterance as a free-text term, zero confidence."""
        text = utterance.strip()
        return cls(filters=FilterSpec(query=text or None), confidence=0.0)


@dataclass(frozen=True, slots=True)
class SuggestionChip:
    id: str
    label: str
    query: str
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class MessageAction:
    label: str
    action: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListingSearchData:
    listings: list[Listing]
    total_count: int
    applied_filters: str


@dataclass(frozen=True, slots=True)
class AssistantResponse:
    intent: UserIntent | None
    message: str
    data: ListingSearchData | None = None
    suggestions: tuple[SuggestionChip, ...] = ()
    actions: tuple[MessageAction, ...] = ()
