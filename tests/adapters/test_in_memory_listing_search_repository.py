"""
Contract tests for InMemoryListingSearchRepository.

The in-memory repository is the reference implementation of the
ListingSearchRepository port. Tests verify:
- Only approved, active listings are returned
- total_count is computed before paging and agrees with the items
- Pages past the end are empty but keep the total
- Sorting routes to the right attribute, NULLs last
- Unknown vocabulary values and inverted ranges match nothing
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from carmarket.adapters.in_memory_listing_search_repository import (
    InMemoryListingSearchRepository,
)
from carmarket.adapters.in_memory_metadata_vocabulary import InMemoryMetadataVocabulary
from carmarket.domain.filters import FilterSpec, SortField, SortOrder, parse_filter_spec
from carmarket.domain.listing import Listing, ListingField, ListingStatus
from carmarket.domain.predicates import Equals, build_predicates
from carmarket.domain.sorting import Paging, Sort, sort_and_paging_for
from carmarket.ports.listing_search_repository import SearchResult


def run(
    repo: InMemoryListingSearchRepository,
    vocabulary: InMemoryMetadataVocabulary,
    spec: FilterSpec,
) -> SearchResult:
    sort, paging = sort_and_paging_for(spec)
    return repo.search(build_predicates(spec, vocabulary.snapshot()), sort, paging)


@pytest.fixture
def inventory(make_listing: Callable[..., Listing]) -> list[Listing]:
    return [
        make_listing(make="Toyota", model="RAV4", body_type="suv", price=Decimal("28000"), year=2021, mileage=20000),
        make_listing(make="Toyota", model="Highlander", body_type="suv", price=Decimal("35000"), year=2022, mileage=10000),
        make_listing(make="Toyota", model="Corolla", body_type="sedan", price=Decimal("18000"), year=2019, mileage=45000),
        make_listing(make="Honda", model="CR-V", body_type="suv", price=Decimal("26000"), year=2020, mileage=None),
        make_listing(make="Honda", model="Civic", title="Sporty Civic", price=Decimal("21000"), year=2018, mileage=60000),
        make_listing(make="Toyota", model="RAV4", body_type="suv", price=Decimal("25000"), status=ListingStatus.PENDING),
        make_listing(make="Toyota", model="RAV4", body_type="suv", price=Decimal("24000"), is_active=False),
        make_listing(make="Ford", model="F-150", body_type="pickup", price=Decimal("40000"), status=ListingStatus.SOLD),
    ]


@pytest.fixture
def repo(inventory: list[Listing]) -> InMemoryListingSearchRepository:
    return InMemoryListingSearchRepository(inventory)


# ==============================================================================
# Visibility
# ==============================================================================


def test_unfiltered_search_returns_only_public_listings(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(limit=48))

    assert result.total_count == 5
    assert all(item.status is ListingStatus.APPROVED and item.is_active for item in result.listings)


def test_toyota_suv_under_25000_scenario(
    make_listing: Callable[..., Listing], vocabulary: InMemoryMetadataVocabulary
) -> None:
    prices = [15000 + 1000 * step for step in range(11)] + [27000, 30000, 33000, 40000]
    suvs = [make_listing(make="Toyota", body_type="suv", price=Decimal(price)) for price in prices]
    decoys = [
        make_listing(make="Honda", body_type="suv", price=Decimal("18000")),
        make_listing(make="Toyota", body_type="sedan", price=Decimal("18000")),
    ]
    repo = InMemoryListingSearchRepository(suvs + decoys)
    spec = parse_filter_spec(
        {"make": "Toyota", "bodyType": "suv", "priceMax": "25000", "page": "1", "limit": "10"}
    ).spec

    result = run(repo, vocabulary, spec)

    assert len(suvs) == 15
    assert result.total_count == sum(1 for price in prices if price <= 25000) == 11
    assert len(result.listings) == min(10, result.total_count)
    assert all(item.make == "Toyota" for item in result.listings)
    assert all(item.body_type == "suv" for item in result.listings)
    assert all(item.price <= Decimal("25000") for item in result.listings)


# ==============================================================================
# Facets
# ==============================================================================


def test_free_text_matches_make_model_or_title(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(query="sporty"))

    assert [item.title for item in result.listings] == ["Sporty Civic"]


def test_make_is_case_insensitive_substring(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(make="HON"))

    assert {item.make for item in result.listings} == {"Honda"}
    assert result.total_count == 2


def test_range_bounds_are_inclusive(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(price_min=Decimal("21000"), price_max=Decimal("28000")))

    assert sorted(item.price for item in result.listings) == [Decimal("21000"), Decimal("26000"), Decimal("28000")]


def test_missing_mileage_does_not_satisfy_mileage_bound(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(mileage_max=100000))

    assert "CR-V" not in {item.model for item in result.listings}


def test_inverted_range_yields_zero_results(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(year_min=2022, year_max=2018))

    assert result.listings == []
    assert result.total_count == 0


def test_unknown_vocabulary_value_yields_zero_results(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(body_type="hovercraft"))

    assert result.total_count == 0


def test_adding_a_facet_never_grows_the_result(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    broad = run(repo, vocabulary, FilterSpec(make="toyota", limit=48))
    narrow = run(repo, vocabulary, FilterSpec(make="toyota", body_type="suv", limit=48))

    assert narrow.total_count <= broad.total_count
    assert {item.id for item in narrow.listings} <= {item.id for item in broad.listings}


# ==============================================================================
# Paging
# ==============================================================================


def test_total_count_is_independent_of_page(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    first = run(repo, vocabulary, FilterSpec(limit=2, page=1))
    third = run(repo, vocabulary, FilterSpec(limit=2, page=3))

    assert first.total_count == third.total_count == 5
    assert len(first.listings) == 2
    assert len(third.listings) == 1


def test_page_past_the_end_is_empty_with_correct_total(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(limit=10, page=99))

    assert result.listings == []
    assert result.total_count == 5


def test_pages_do_not_overlap(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    pages = [run(repo, vocabulary, FilterSpec(limit=2, page=page)).listings for page in (1, 2, 3)]
    ids = [item.id for page in pages for item in page]

    assert len(ids) == len(set(ids)) == 5


# ==============================================================================
# Sorting
# ==============================================================================


def test_default_sort_is_newest_first(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec())

    created = [item.created_at for item in result.listings]
    assert created == sorted(created, reverse=True)


def test_sort_by_price_ascending(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    result = run(repo, vocabulary, FilterSpec(sort_by=SortField.PRICE, sort_order=SortOrder.ASC))

    prices = [item.price for item in result.listings]
    assert prices == sorted(prices)


def test_sort_by_mileage_puts_missing_values_last(
    repo: InMemoryListingSearchRepository, vocabulary: InMemoryMetadataVocabulary
) -> None:
    for order in (SortOrder.ASC, SortOrder.DESC):
        result = run(repo, vocabulary, FilterSpec(sort_by=SortField.MILEAGE, sort_order=order))

        assert result.listings[-1].model == "CR-V"


def test_search_accepts_predicates_directly(repo: InMemoryListingSearchRepository) -> None:
    result = repo.search(
        (Equals(ListingField.STATUS, "sold"),),
        Sort(ListingField.PRICE, SortOrder.DESC),
        Paging(page=1, limit=10),
    )

    assert [item.model for item in result.listings] == ["F-150"]


# ==============================================================================
# get_by_id
# ==============================================================================


def test_get_by_id_returns_listing_regardless_of_status(
    repo: InMemoryListingSearchRepository, inventory: list[Listing]
) -> None:
    pending = inventory[5]

    assert repo.get_by_id(pending.id) == pending


def test_get_by_id_returns_none_when_missing(repo: InMemoryListingSearchRepository) -> None:
    assert repo.get_by_id("99999999-0000-0000-0000-000000000000") is None
