"""
Test suite for AnswerAssistantQuery UseCase.

The listing pipeline runs against in-memory adapters; the completion
service is mocked.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from unittest.mock import Mock

import pytest

from carmarket.adapters.in_memory_listing_search_repository import (
    InMemoryListingSearchRepository,
)
from carmarket.adapters.in_memory_metadata_vocabulary import InMemoryMetadataVocabulary
from carmarket.domain.assistant import ExtractedQuery, UserIntent
from carmarket.domain.errors import ExternalServiceError
from carmarket.domain.filters import FilterSpec
from carmarket.domain.listing import Listing
from carmarket.ports.text_completion import CompletionResponse, TextCompletionService
from carmarket.use_cases.answer_assistant_query import (
    GENERIC_FALLBACK_MESSAGE,
    INTENT_SCRIPTS,
    WELCOME_MESSAGE,
    AnswerAssistantQuery,
    AnswerAssistantQueryRequest,
    generic_fallback,
    welcome,
)
from carmarket.use_cases.extract_listing_query import ExtractListingQuery
from carmarket.use_cases.search_listings import SearchListings
from carmarket.use_cases.summarize_search_results import SummarizeSearchResults


@pytest.fixture()
def inventory(make_listing: Callable[..., Listing]) -> list[Listing]:
    listings = [
        make_listing(make="Toyota", model="RAV4", body_type="suv", price=Decimal("28000")),
        make_listing(make="Toyota", model="Highlander", body_type="suv", price=Decimal("36000")),
        make_listing(make="Honda", model="Civic", body_type="sedan", price=Decimal("21000")),
    ]
    listings += [make_listing(make="Ford", model="Focus", price=Decimal("15000")) for _ in range(6)]
    return listings


@pytest.fixture()
def mock_completion() -> Mock:
    return Mock(spec=TextCompletionService)


def build_use_case(
    vocabulary: InMemoryMetadataVocabulary,
    inventory: list[Listing],
    completion: Mock | None = None,
    threshold: float = 0.5,
    extract: ExtractListingQuery | None = None,
) -> AnswerAssistantQuery:
    return AnswerAssistantQuery(
        extract_listing_query=extract or ExtractListingQuery(vocabulary),
        search_listings=SearchListings(InMemoryListingSearchRepository(inventory), vocabulary),
        summarize_search_results=SummarizeSearchResults(),
        confidence_threshold=threshold,
        text_completion_service=completion,
    )


def ask(use_case: AnswerAssistantQuery, query: str):
    return use_case.execute(AnswerAssistantQueryRequest(query=query, conversation_id="conv-1"))


# ==============================================================================
# Welcome and Fallback
# ==============================================================================


def test_welcome_has_four_suggestions() -> None:
    response = welcome()

    assert response.intent is None
    assert response.message == WELCOME_MESSAGE
    assert len(response.suggestions) == 4


def test_generic_fallback() -> None:
    response = generic_fallback()

    assert response.message == GENERIC_FALLBACK_MESSAGE
    assert response.data is None


def test_unexpected_failure_returns_generic_fallback(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    extract = Mock(spec=ExtractListingQuery)
    extract.execute.side_effect = RuntimeError("boom")
    use_case = build_use_case(vocabulary, inventory, extract=extract)

    response = ask(use_case, "Show me Toyota SUVs")

    assert response == generic_fallback()


# ==============================================================================
# Listing Search Pipeline
# ==============================================================================


def test_listing_query_runs_extract_search_summarize(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    use_case = build_use_case(vocabulary, inventory)

    response = ask(use_case, "Show me Toyota SUVs under $30,000")

    assert response.intent is UserIntent.CAR_LISTING
    assert response.data is not None
    assert [listing.model for listing in response.data.listings] == ["RAV4"]
    assert response.data.total_count == 1
    assert response.data.applied_filters == "Make: Toyota, Price: $0-$30000, Body type: Suv"
    assert response.message.startswith("Great news! I found 1 car")
    assert len(response.actions) == 1
    assert len(response.suggestions) <= 4


def test_listing_results_are_capped_at_five(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    use_case = build_use_case(vocabulary, inventory)

    response = ask(use_case, "Show me all available Ford cars")

    assert response.data is not None
    assert response.data.total_count == 6
    assert len(response.data.listings) == 5
    assert len(response.actions) == 5


def test_zero_results_return_broadening_chips(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    use_case = build_use_case(vocabulary, inventory)

    response = ask(use_case, "Show me BMW cars under $10,000")

    assert response.data is not None
    assert response.data.total_count == 0
    assert response.suggestions[0].id == "all-cars"
    assert response.message.startswith("I couldn't find any cars")


def test_low_confidence_searches_free_text(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    extract = Mock(spec=ExtractListingQuery)
    extract.execute.return_value = ExtractedQuery(filters=FilterSpec(make="Ford"), confidence=0.3)
    use_case = build_use_case(vocabulary, inventory, extract=extract, threshold=0.5)

    response = ask(use_case, "show me the Civic")

    assert response.data is not None
    assert response.data.applied_filters == "Search: show me the Civic"
    assert response.data.total_count == 0


def test_confidence_at_threshold_trusts_extracted_facets(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    extract = Mock(spec=ExtractListingQuery)
    extract.execute.return_value = ExtractedQuery(filters=FilterSpec(make="Ford"), confidence=0.5)
    use_case = build_use_case(vocabulary, inventory, extract=extract, threshold=0.5)

    response = ask(use_case, "show me the Civic")

    assert response.data is not None
    assert {listing.make for listing in response.data.listings} == {"Ford"}


# ==============================================================================
# Other Intents
# ==============================================================================


def test_other_intent_uses_completion(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing], mock_completion: Mock
) -> None:
    mock_completion.complete.return_value = CompletionResponse(text="The X5 has a 3.0L engine.")
    use_case = build_use_case(vocabulary, inventory, completion=mock_completion)

    response = ask(use_case, "What are the specs of BMW X5?")

    assert response.intent is UserIntent.CAR_SPECS
    assert response.message == "The X5 has a 3.0L engine."
    assert response.suggestions == INTENT_SCRIPTS[UserIntent.CAR_SPECS].suggestions
    request = mock_completion.complete.call_args.args[0]
    assert request.system_prompt == INTENT_SCRIPTS[UserIntent.CAR_SPECS].system_prompt


@pytest.mark.parametrize(
    ("query", "intent"),
    [
        ("Compare Honda Civic vs Toyota Corolla", UserIntent.CAR_COMPARE),
        ("How do I buy a car from you?", UserIntent.FAQ),
    ],
)
def test_other_intent_falls_back_when_completion_fails(
    vocabulary: InMemoryMetadataVocabulary,
    inventory: list[Listing],
    mock_completion: Mock,
    query: str,
    intent: UserIntent,
) -> None:
    mock_completion.complete.side_effect = ExternalServiceError("text_completion", "timed out")
    use_case = build_use_case(vocabulary, inventory, completion=mock_completion)

    response = ask(use_case, query)

    assert response.intent is intent
    assert response.message == INTENT_SCRIPTS[intent].fallback_message


def test_other_intent_without_completion_service_uses_fallback(
    vocabulary: InMemoryMetadataVocabulary, inventory: list[Listing]
) -> None:
    use_case = build_use_case(vocabulary, inventory)

    response = ask(use_case, "What financing options do you offer?")

    assert response.intent is UserIntent.FAQ
    assert response.message == INTENT_SCRIPTS[UserIntent.FAQ].fallback_message
