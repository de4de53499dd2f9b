from __future__ import annotations

from dataclasses import dataclass, field

from carmarket.domain.filters import FilterSpec, IgnoredField
from carmarket.domain.listing import Listing
from carmarket.domain.predicates import build_predicates
from carmarket.domain.sorting import sort_and_paging_for
from carmarket.ports.listing_search_repository import ListingSearchRepository
from carmarket.ports.metadata_vocabulary import MetadataVocabulary


@dataclass(frozen=True, slots=True)
class SearchListingsRequest:
    filters: FilterSpec
    ignored: tuple[IgnoredField, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class ResultEnvelope:
    items: list[Listing]
    pagination: Pagination
    applied_filters: FilterSpec
    ignored: tuple[IgnoredField, ...] = field(default_factory=tuple)


class SearchListings:
    """
    Faceted listing search with sorting and pagination.

    Builds the predicate tuple once and hands it to the repository, which
    uses it for both the count and the page. Filtering itself happens in
    the repository adapter.
    """

    def __init__(
        self,
        listing_search_repository: ListingSearchRepository,
        metadata_vocabulary: MetadataVocabulary,
    ) -> None:
        self._repository = listing_search_repository
        self._vocabulary = metadata_vocabulary

    def execute(self, request: SearchListingsRequest) -> ResultEnvelope:
        """
        Execute listing search.

        Args:
            request: Parsed filter spec plus the fields dropped while parsing it

        Returns:
            ResultEnvelope with the page of listings and pagination metadata

        Raises:
            FilterValidationError: If the spec was built in code with wrong types
        """
        spec = request.filters
        spec.validate()

        predicates = build_predicates(spec, self._vocabulary.snapshot())
        sort, paging = sort_and_paging_for(spec)

        result = self._repository.search(
            predicates=predicates,
            sort=sort,
            paging=paging,
        )

        return ResultEnvelope(
            items=result.listings,
            pagination=Pagination(
                page=paging.page,
                limit=paging.limit,
                total=result.total_count,
                total_pages=paging.total_pages(result.total_count),
            ),
            applied_filters=spec,
            ignored=request.ignored,
        )
