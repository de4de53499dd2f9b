from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from carmarket.domain.assistant import (
    MAX_LISTING_ACTIONS,
    AssistantResponse,
    ExtractedQuery,
    ListingSearchData,
    SuggestionChip,
    UserIntent,
)
from carmarket.domain.errors import ExternalServiceError
from carmarket.domain.query_understanding import classify_intent
from carmarket.ports.text_completion import CompletionRequest, TextCompletionService
from carmarket.use_cases.extract_listing_query import (
    ExtractListingQuery,
    ExtractListingQueryRequest,
)
from carmarket.use_cases.search_listings import SearchListings, SearchListingsRequest
from carmarket.use_cases.summarize_search_results import (
    SummarizeSearchResults,
    SummarizeSearchResultsRequest,
)

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "👋 Hi! I'm your car marketplace assistant. I can help you with:\n\n"
    "🚗 Car specifications and features\n"
    "📋 Available cars in our inventory\n"
    "⚖️ Comparing different car models\n"
    "❓ Frequently asked questions\n\n"
    "How can I assist you today?"
)

WELCOME_SUGGESTIONS = (
    SuggestionChip("1", "Show available cars", "What cars do you have available?", "🚗"),
    SuggestionChip("2", "Compare cars", "Compare Honda Civic vs Toyota Corolla", "⚖️"),
    SuggestionChip("3", "Car specs", "What are the specs of BMW X5?", "📊"),
    SuggestionChip("4", "How to buy", "How do I buy a car from you?", "❓"),
)

GENERIC_FALLBACK_MESSAGE = (
    "I'm having trouble understanding your question. "
    "Could you please rephrase it or try asking something else?"
)

GENERIC_SUGGESTIONS = (
    SuggestionChip("1", "View all cars", "Show me all available cars", "🚗"),
    SuggestionChip("2", "Get help", "How can I buy a car?", "❓"),
)


@dataclass(frozen=True, slots=True)
class _IntentScript:
    system_prompt: str
    fallback_message: str
    suggestions: tuple[SuggestionChip, ...]


INTENT_SCRIPTS = {
    UserIntent.CAR_SPECS: _IntentScript(
        system_prompt=(
            "You are a knowledgeable car expert for a car marketplace. Answer questions "
            "about car specifications, features and performance accurately and concisely. "
            "If you are not sure about a figure, say so."
        ),
        fallback_message=(
            "I'm having trouble fetching car specifications right now. "
            "Please try again or contact our support team."
        ),
        suggestions=(
            SuggestionChip("1", "View available cars", "What cars do you have available?", "🚗"),
            SuggestionChip("2", "Compare cars", "Compare two cars", "⚖️"),
        ),
    ),
    UserIntent.CAR_COMPARE: _IntentScript(
        system_prompt=(
            "You are a car comparison expert for a car marketplace. Compare the cars the "
            "user mentions on price range, reliability, fuel economy, space and features. "
            "Keep it balanced and end with who each car suits best."
        ),
        fallback_message=(
            "I'm having trouble comparing those cars right now. "
            "Please try again or browse our listings to compare them side by side."
        ),
        suggestions=(
            SuggestionChip("1", "View available", "Show me these cars in stock", "🚗"),
            SuggestionChip("2", "More specs", "Tell me more about specifications", "📊"),
        ),
    ),
    UserIntent.FAQ: _IntentScript(
        system_prompt=(
            "You are a helpful customer service assistant for a car marketplace. Answer "
            "questions about buying, selling, financing, test drives, payments and policies. "
            "Be friendly and concise."
        ),
        fallback_message=(
            "I'm having trouble answering that right now. "
            "Please try again or contact our support team."
        ),
        suggestions=(
            SuggestionChip("1", "Financing options", "What financing options do you offer?", "💳"),
            SuggestionChip("2", "Test drive", "How do I schedule a test drive?", "🚙"),
            SuggestionChip("3", "Return policy", "What's your return policy?", "↩️"),
        ),
    ),
}


@dataclass(frozen=True, slots=True)
class AnswerAssistantQueryRequest:
    query: str
    conversation_id: str | None = None


class AnswerAssistantQuery:
    """
    Answers one assistant message.

    Listing requests run extract → search → summarize and return the top
    listings. Extracted facets are only trusted at or above the confidence
    threshold; below it the utterance is searched as free text. Other intents
    are answered by the completion service with fixed fallbacks. Any failure
    ends in a generic fallback response, never an error.
    """

    def __init__(
        self,
        extract_listing_query: ExtractListingQuery,
        search_listings: SearchListings,
        summarize_search_results: SummarizeSearchResults,
        confidence_threshold: float,
        text_completion_service: TextCompletionService | None = None,
    ) -> None:
        self._extract = extract_listing_query
        self._search = search_listings
        self._summarize = summarize_search_results
        self._confidence_threshold = confidence_threshold
        self._completion = text_completion_service

    def execute(self, request: AnswerAssistantQueryRequest) -> AssistantResponse:
        utterance = request.query.strip()

        try:
            intent = classify_intent(utterance)
            logger.info(
                "Assistant query classified",
                extra={"intent": intent.value, "conversation_id": request.conversation_id},
            )

            if intent is UserIntent.CAR_LISTING:
                return self._answer_listing_search(utterance)
            return self._answer_with_completion(intent, utterance)
        except Exception:
            logger.exception(
                "Assistant query failed, returning generic fallback",
                extra={"conversation_id": request.conversation_id},
            )
            return generic_fallback()

    def _answer_listing_search(self, utterance: str) -> AssistantResponse:
        extracted = self._extract.execute(ExtractListingQueryRequest(utterance=utterance))

        if extracted.confidence < self._confidence_threshold:
            logger.info(
                "Extraction confidence below threshold, searching free text",
                extra={
                    "confidence": extracted.confidence,
                    "threshold": self._confidence_threshold,
                },
            )
            extracted = ExtractedQuery.free_text(utterance)

        filters = dataclasses.replace(extracted.filters, page=1, limit=MAX_LISTING_ACTIONS)
        envelope = self._search.execute(SearchListingsRequest(filters=filters))

        summary = self._summarize.execute(
            SummarizeSearchResultsRequest(
                envelope=envelope,
                utterance=utterance,
                features=extracted.features,
            )
        )

        return AssistantResponse(
            intent=UserIntent.CAR_LISTING,
            message=summary.message,
            data=ListingSearchData(
                listings=envelope.items[:MAX_LISTING_ACTIONS],
                total_count=envelope.pagination.total,
                applied_filters=summary.applied_filters,
            ),
            suggestions=summary.suggestions,
            actions=summary.actions,
        )

    def _answer_with_completion(self, intent: UserIntent, utterance: str) -> AssistantResponse:
        script = INTENT_SCRIPTS[intent]
        message = script.fallback_message

        if self._completion is not None:
            try:
                response = self._completion.complete(
                    CompletionRequest(system_prompt=script.system_prompt, user_prompt=utterance)
                )
                message = response.text or message
            except ExternalServiceError as e:
                logger.warning(
                    "Assistant completion failed, using fallback message",
                    extra={"intent": intent.value, "error": e.message},
                )

        return AssistantResponse(intent=intent, message=message, suggestions=script.suggestions)


def welcome() -> AssistantResponse:
    return AssistantResponse(intent=None, message=WELCOME_MESSAGE, suggestions=WELCOME_SUGGESTIONS)


def generic_fallback() -> AssistantResponse:
    return AssistantResponse(
        intent=None,
        message=GENERIC_FALLBACK_MESSAGE,
        suggestions=GENERIC_SUGGESTIONS,
    )
