from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal

from carmarket.domain.assistant import (
    MAX_LISTING_ACTIONS,
    MAX_SUGGESTIONS,
    MessageAction,
    SuggestionChip,
)
from carmarket.domain.errors import ExternalServiceError
from carmarket.domain.filters import FilterSpec
from carmarket.domain.listing import Listing
from carmarket.ports.text_completion import CompletionRequest, TextCompletionService
from carmarket.use_cases.search_listings import ResultEnvelope

logger = logging.getLogger(__name__)

NO_FILTERS = "No specific filters"
BUDGET_STEP = Decimal("1.25")

SYSTEM_PROMPT = (
    "You are a friendly assistant for a used-car marketplace. "
    "Summarize search results for the shopper in two or three sentences. "
    "Mention how many cars were found and highlight the best match. "
    "Do not invent cars or prices that are not in the data."
)


@dataclass(frozen=True, slots=True)
class SummarizeSearchResultsRequest:
    envelope: ResultEnvelope
    utterance: str = ""
    features: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SearchSummary:
    message: str
    applied_filters: str
    suggestions: tuple[SuggestionChip, ...]
    actions: tuple[MessageAction, ...]


class SummarizeSearchResults:
    """
    Synopsis plus refinement chips for a search result.

    The synopsis comes from the completion service when one is configured;
    on any service failure a fixed template is used instead. Chips and
    actions are plain facet heuristics.
    """

    def __init__(self, text_completion_service: TextCompletionService | None = None) -> None:
        self._completion = text_completion_service

    def execute(self, request: SummarizeSearchResultsRequest) -> SearchSummary:
        envelope = request.envelope
        spec = envelope.applied_filters

        return SearchSummary(
            message=self._synopsis(request),
            applied_filters=describe_applied_filters(spec, request.features),
            suggestions=suggest_refinements(spec, envelope.items, request.features),
            actions=listing_actions(envelope.items),
        )

    def _synopsis(self, request: SummarizeSearchResultsRequest) -> str:
        envelope = request.envelope
        fallback = fallback_synopsis(envelope.items, envelope.pagination.total)

        if self._completion is None:
            return fallback

        top = "\n".join(
            f"- {listing.display_name}, ${listing.price:,.0f}"
            + (f", {listing.mileage:,} miles" if listing.mileage is not None else "")
            for listing in envelope.items[:3]
        )
        user_prompt = (
            f"Shopper asked: {request.utterance}\n"
            f"Filters: {describe_applied_filters(envelope.applied_filters, request.features)}\n"
            f"Total matches: {envelope.pagination.total}\n"
            f"Top matches:\n{top or '- none'}"
        )

        try:
            response = self._completion.complete(
                CompletionRequest(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt, max_tokens=150)
            )
        except ExternalServiceError as e:
            logger.warning("Result summary failed, using template", extra={"error": e.message})
            return fallback

        return response.text or fallback


def fallback_synopsis(items: list[Listing], total: int) -> str:
    if total == 0 or not items:
        return (
            "I couldn't find any cars matching your criteria. "
            "Try widening your budget or removing a filter."
        )

    top = items[0]
    noun = "car" if total == 1 else "cars"
    return (
        f"Great news! I found {total} {noun} matching your search. "
        f"The top result is a {top.display_name} for ${top.price:,.0f}."
    )


def describe_applied_filters(spec: FilterSpec, features: tuple[str, ...] = ()) -> str:
    """Human-readable list of the facets in effect, e.g. ``Make: Honda, Price: $0-$30000``."""
    parts: list[str] = []

    if spec.query:
        parts.append(f"Search: {spec.query}")
    if spec.make:
        parts.append(f"Make: {spec.make.title()}")
    if spec.model:
        parts.append(f"Model: {spec.model.title()}")
    if spec.year_min is not None or spec.year_max is not None:
        if spec.year_min == spec.year_max:
            parts.append(f"Year: {spec.year_min}")
        elif spec.year_max is None:
            parts.append(f"Year: {spec.year_min}+")
        else:
            parts.append(f"Year: {spec.year_min or 'any'}-{spec.year_max}")
    if spec.price_min is not None or spec.price_max is not None:
        low = f"${spec.price_min or 0:.0f}"
        parts.append(f"Price: {low}-${spec.price_max:.0f}" if spec.price_max is not None else f"Price: {low}+")
    if spec.mileage_max is not None:
        parts.append(f"Mileage: up to {spec.mileage_max:,}")

    for label, value in (
        ("Body type", spec.body_type),
        ("Fuel", spec.fuel_type),
        ("Transmission", spec.transmission),
        ("Condition", spec.condition),
        ("Location", spec.location or spec.city or spec.state or spec.country),
    ):
        if value:
            parts.append(f"{label}: {value.replace('_', ' ').title()}")

    if features:
        parts.append("Features: " + ", ".join(f.replace("_", " ") for f in features))

    return ", ".join(parts) if parts else NO_FILTERS


def suggest_refinements(
    spec: FilterSpec, items: list[Listing], features: tuple[str, ...] = ()
) -> tuple[SuggestionChip, ...]:
    """
    Up to MAX_SUGGESTIONS chips.

    Empty results get broadening chips first. Otherwise chips only narrow by
    facets the search did not already set.
    """
    if not items:
        return _broaden(spec)[:MAX_SUGGESTIONS]

    subject = f"{spec.make.title()} cars" if spec.make else "cars"
    chips: list[SuggestionChip] = []

    if spec.price_max is None:
        chips.append(
            SuggestionChip("price-filter", "Under $25,000", f"Show me {subject} under $25,000", "💰")
        )
    if spec.body_type is None:
        body_types = Counter(listing.body_type for listing in items if listing.body_type)
        if body_types:
            body_type = body_types.most_common(1)[0][0]
            chips.append(
                SuggestionChip(
                    f"body-{body_type}",
                    f"{body_type.replace('_', ' ').title()} only",
                    f"Show me {body_type.replace('_', ' ')} {subject}",
                    "🚙",
                )
            )
    if spec.year_min is None:
        chips.append(
            SuggestionChip("newer-models", "2020 or newer", f"Show me {subject} from 2020 or newer", "✨")
        )
    if spec.mileage_max is None:
        chips.append(
            SuggestionChip("low-mileage", "Low mileage", f"Show me low mileage {subject}", "📉")
        )
    if not features:
        chips.append(
            SuggestionChip("features", "With GPS", f"Show me {subject} with GPS navigation", "🧭")
        )
    if spec.fuel_type is None:
        chips.append(
            SuggestionChip("fuel-efficient", "Hybrids", f"Show me hybrid {subject}", "🔋")
        )

    if not chips:
        chips.append(SuggestionChip("all-cars", "See all cars", "Show me all available cars", "🚗"))

    return tuple(chips[:MAX_SUGGESTIONS])


def _broaden(spec: FilterSpec) -> tuple[SuggestionChip, ...]:
    chips = [SuggestionChip("all-cars", "See all cars", "Show me all available cars", "🚗")]

    if spec.price_max is not None:
        budget = (spec.price_max * BUDGET_STEP).quantize(Decimal("1"))
        chips.append(
            SuggestionChip(
                "expand-budget",
                f"Raise budget to ${budget:,.0f}",
                f"Show me cars under ${budget:,.0f}",
                "💰",
            )
        )
    if spec.body_type is not None:
        chips.append(
            SuggestionChip("different-type", "Any body type", "Show me sedans, SUVs and hatchbacks", "🔄")
        )
    if spec.year_min is not None:
        chips.append(
            SuggestionChip("older-models", "Include older models", "Show me cars from any year", "📅")
        )
    if spec.mileage_max is not None:
        chips.append(
            SuggestionChip("any-mileage", "Any mileage", "Show me cars with any mileage", "🛣️")
        )

    return tuple(chips)


def listing_actions(items: list[Listing]) -> tuple[MessageAction, ...]:
    return tuple(
        MessageAction(
            label=f"View {listing.display_name}",
            action="view_listing",
            data={"listingId": str(listing.id)},
        )
        for listing in items[:MAX_LISTING_ACTIONS]
    )
