from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from carmarket.domain.listing import Listing
from carmarket.domain.predicates import Predicate
from carmarket.domain.sorting import Paging, Sort


@dataclass(frozen=True)
class SearchResult:
    """Result from listing search including pagination metadata."""

    listings: list[Listing]
    total_count: int  # Total matching listings before paging


class ListingSearchRepository(ABC):
    """
    Port for listing data access (the query executor).

    Contract (Preconditions):
        - predicates come from a single build_predicates call (UseCase)
        - paging is pre-validated by the caller
        - Implementations trust inputs and do not re-validate

    Contract (Postconditions):
        - total_count is computed from exactly the same predicates as the
          page of listings, ignoring offset/limit
        - len(listings) <= paging.limit
        - an offset past the end yields [] with the correct total_count
        - count and fetch need not be atomic: a row inserted between them may
          skew total_count by one
    """

    @abstractmethod
    def search(
        self,
        predicates: tuple[Predicate, ...],
        sort: Sort,
        paging: Paging,
    ) -> SearchResult:
        """
        Search listings with an AND of predicates, ordered and paged.

        Args:
            predicates: Conjunction of predicates - pre-built
            sort: Resolved sort column and direction
            paging: Pagination parameters - pre-validated

        Returns:
            SearchResult containing the page of listings and the total count
        """
        ...

    @abstractmethod
    def get_by_id(self, listing_id: str) -> Listing | None:
        """
        Get a listing by ID regardless of its status.

        Returns:
            Listing if found, None otherwise
        """
        ...
