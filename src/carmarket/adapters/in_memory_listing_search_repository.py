from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from carmarket.domain.listing import Listing
from carmarket.domain.predicates import (
    Contains,
    Equals,
    MatchNone,
    Or,
    Predicate,
    RangeMax,
    RangeMin,
)
from carmarket.domain.sorting import Paging, Sort
from carmarket.ports.listing_search_repository import ListingSearchRepository, SearchResult


class InMemoryListingSearchRepository(ListingSearchRepository):
    """
    Canonical contract implementation for tests.

    - Stores listings in insertion order
    - Evaluates every predicate (AND semantics)
    - Sorts with insertion order as the tie-breaker
    - Applies paging AFTER filtering and sorting
    - Returns total_count of matching listings before paging
    """

    def __init__(self, listings: list[Listing]) -> None:
        self._listings = listings

    def search(
        self,
        predicates: tuple[Predicate, ...],
        sort: Sort,
        paging: Paging,
    ) -> SearchResult:
        # Trust that UseCase has built predicates and validated paging
        matches = [
            listing
            for listing in self._listings
            if all(_evaluate(predicate, listing) for predicate in predicates)
        ]
        total_count = len(matches)  # Count BEFORE paging

        matches = self._sorted(matches, sort)

        start = paging.offset
        end = paging.offset + paging.limit

        return SearchResult(listings=matches[start:end], total_count=total_count)

    def get_by_id(self, listing_id: str) -> Listing | None:
        return next((listing for listing in self._listings if listing.id == listing_id), None)

    def _sorted(self, listings: list[Listing], sort: Sort) -> list[Listing]:
        # Rows with no value sort last, like NULLS LAST
        present = [item for item in listings if item.value_of(sort.field) is not None]
        missing = [item for item in listings if item.value_of(sort.field) is None]
        present.sort(key=lambda item: _sort_key(item.value_of(sort.field)), reverse=sort.descending)
        return present + missing


def _sort_key(value: object) -> int | Decimal | float:
    if isinstance(value, datetime):
        return value.timestamp()
    return value  # type: ignore[return-value]


def _evaluate(predicate: Predicate, listing: Listing) -> bool:
    if isinstance(predicate, Or):
        return any(_evaluate(inner, listing) for inner in predicate.predicates)
    if isinstance(predicate, MatchNone):
        return False

    value = listing.value_of(predicate.field)
    if value is None:
        return False

    if isinstance(predicate, Equals):
        if isinstance(predicate.value, bool):
            return value is predicate.value
        return str(value).lower() == predicate.value
    if isinstance(predicate, Contains):
        return predicate.value in str(value).lower()
    if isinstance(predicate, RangeMin):
        return value >= predicate.value  # type: ignore[operator]
    if isinstance(predicate, RangeMax):
        return value <= predicate.value  # type: ignore[operator]

    raise TypeError(f"Unsupported predicate: {predicate!r}")
