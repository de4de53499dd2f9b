"""
Test suite for SummarizeSearchResults UseCase.

Verifies:
- Template synopsis when no completion service is configured or it fails
- Refinement chips: broadening for empty results, narrowing otherwise
- At most four chips and five listing actions
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from unittest.mock import Mock

import pytest

from carmarket.domain.assistant import MAX_LISTING_ACTIONS, MAX_SUGGESTIONS, MessageAction
from carmarket.domain.errors import ExternalServiceError
from carmarket.domain.filters import FilterSpec
from carmarket.domain.listing import Listing
from carmarket.ports.text_completion import CompletionResponse, TextCompletionService
from carmarket.use_cases.search_listings import Pagination, ResultEnvelope
from carmarket.use_cases.summarize_search_results import (
    NO_FILTERS,
    SummarizeSearchResults,
    SummarizeSearchResultsRequest,
    describe_applied_filters,
    fallback_synopsis,
    suggest_refinements,
)


def envelope_for(items: list[Listing], spec: FilterSpec | None = None, total: int | None = None) -> ResultEnvelope:
    total = len(items) if total is None else total
    return ResultEnvelope(
        items=items,
        pagination=Pagination(page=1, limit=10, total=total, total_pages=1 if total else 0),
        applied_filters=spec or FilterSpec(),
    )


@pytest.fixture()
def mock_completion() -> Mock:
    return Mock(spec=TextCompletionService)


# ==============================================================================
# Synopsis
# ==============================================================================


def test_zero_results_synopsis_suggests_broadening() -> None:
    summary = SummarizeSearchResults().execute(
        SummarizeSearchResultsRequest(envelope=envelope_for([], FilterSpec(make="Ferrari")))
    )

    assert summary.message.startswith("I couldn't find any cars matching your criteria.")
    assert summary.actions == ()


def test_template_synopsis_mentions_count_and_top_result(make_listing: Callable[..., Listing]) -> None:
    items = [make_listing(make="Honda", model="Civic", year=2021, price=Decimal("22500"))]

    assert fallback_synopsis(items, 12) == (
        "Great news! I found 12 cars matching your search. "
        "The top result is a 2021 Honda Civic for $22,500."
    )


def test_template_synopsis_singular(make_listing: Callable[..., Listing]) -> None:
    assert "I found 1 car matching" in fallback_synopsis([make_listing()], 1)


def test_completion_text_is_used_when_available(
    mock_completion: Mock, make_listing: Callable[..., Listing]
) -> None:
    mock_completion.complete.return_value = CompletionResponse(text="Here are some great Toyotas.")
    use_case = SummarizeSearchResults(mock_completion)

    summary = use_case.execute(
        SummarizeSearchResultsRequest(envelope=envelope_for([make_listing()]), utterance="toyotas")
    )

    assert summary.message == "Here are some great Toyotas."
    request = mock_completion.complete.call_args.args[0]
    assert "Shopper asked: toyotas" in request.user_prompt
    assert "Total matches: 1" in request.user_prompt


def test_completion_failure_falls_back_to_template(
    mock_completion: Mock, make_listing: Callable[..., Listing]
) -> None:
    mock_completion.complete.side_effect = ExternalServiceError("text_completion", "HTTP 500")
    use_case = SummarizeSearchResults(mock_completion)
    items = [make_listing(price=Decimal("18000"))]

    summary = use_case.execute(SummarizeSearchResultsRequest(envelope=envelope_for(items, total=3)))

    assert "3 cars" in summary.message
    assert "$18,000" in summary.message


def test_empty_completion_falls_back_to_template(
    mock_completion: Mock, make_listing: Callable[..., Listing]
) -> None:
    mock_completion.complete.return_value = CompletionResponse(text=None)
    use_case = SummarizeSearchResults(mock_completion)

    summary = use_case.execute(SummarizeSearchResultsRequest(envelope=envelope_for([make_listing()])))

    assert summary.message.startswith("Great news!")


# ==============================================================================
# Applied Filters
# ==============================================================================


def test_describe_applied_filters() -> None:
    spec = FilterSpec(make="honda", price_max=Decimal("30000"), body_type="suv", year_min=2020)

    assert describe_applied_filters(spec) == "Make: Honda, Year: 2020+, Price: $0-$30000, Body type: Suv"


def test_describe_applied_filters_with_features() -> None:
    assert describe_applied_filters(FilterSpec(), ("gps_navigation",)) == "Features: gps navigation"


def test_describe_no_filters() -> None:
    assert describe_applied_filters(FilterSpec()) == NO_FILTERS


# ==============================================================================
# Suggestions
# ==============================================================================


def test_empty_results_start_with_broadening_chips() -> None:
    spec = FilterSpec(price_max=Decimal("20000"), body_type="coupe", year_min=2023, mileage_max=1000)

    chips = suggest_refinements(spec, [])

    assert chips[0].id == "all-cars"
    assert chips[1].id == "expand-budget"
    assert "$25,000" in chips[1].label
    assert len(chips) == MAX_SUGGESTIONS


def test_chips_only_narrow_unset_facets(make_listing: Callable[..., Listing]) -> None:
    items = [make_listing(body_type="suv"), make_listing(body_type="suv"), make_listing(body_type="sedan")]

    chips = suggest_refinements(FilterSpec(make="toyota"), items)

    assert [chip.id for chip in chips] == ["price-filter", "body-suv", "newer-models", "low-mileage"]
    assert chips[0].query == "Show me Toyota cars under $25,000"


def test_chips_skip_facets_already_set(make_listing: Callable[..., Listing]) -> None:
    spec = FilterSpec(price_max=Decimal("30000"), body_type="suv", year_min=2020, mileage_max=50000)

    chips = suggest_refinements(spec, [make_listing()], ("sunroof",))

    assert [chip.id for chip in chips] == ["fuel-efficient"]


def test_fully_refined_search_offers_all_cars(make_listing: Callable[..., Listing]) -> None:
    spec = FilterSpec(
        price_max=Decimal("30000"), body_type="suv", year_min=2020, mileage_max=50000, fuel_type="hybrid"
    )

    chips = suggest_refinements(spec, [make_listing()], ("sunroof",))

    assert [chip.id for chip in chips] == ["all-cars"]


# ==============================================================================
# Actions
# ==============================================================================


def test_actions_link_to_at_most_five_listings(make_listing: Callable[..., Listing]) -> None:
    items = [make_listing() for _ in range(8)]

    summary = SummarizeSearchResults().execute(SummarizeSearchResultsRequest(envelope=envelope_for(items)))

    assert len(summary.actions) == MAX_LISTING_ACTIONS
    assert summary.actions[0] == MessageAction(
        label="View 2020 Toyota Corolla",
        action="view_listing",
        data={"listingId": items[0].id},
    )
    assert len(summary.suggestions) <= MAX_SUGGESTIONS
