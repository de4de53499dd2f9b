from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from carmarket.domain.filters import FilterSpec, parse_filter_spec
from carmarket.domain.listing import Listing
from carmarket.entrypoints.http.dtos.search import (
    IgnoredFieldDTO,
    ListingResponseDTO,
    PaginationDTO,
    SearchQueryDTO,
    SearchResponseDTO,
)
from carmarket.use_cases.search_listings import ResultEnvelope, SearchListingsRequest


class SearchMapper:
    """Maps between REST DTOs and domain models for listing search."""

    @staticmethod
    def to_domain_request(
        dto: SearchQueryDTO,
        query_params: Mapping[str, str] | None = None,
    ) -> SearchListingsRequest:
        """
        Builds the domain request through the best-effort filter parser.

        Args:
            dto: Declared query parameters, still raw text
            query_params: Full query string; parameters the DTO does not declare
                are passed through so they are reported as unknown

        Returns:
            SearchListingsRequest with the parsed spec and the ignored fields
        """
        raw: dict[str, Any] = dto.model_dump(by_alias=True, exclude_none=True)
        for key, value in (query_params or {}).items():
            raw.setdefault(key, value)

        parsed = parse_filter_spec(raw)
        return SearchListingsRequest(filters=parsed.spec, ignored=parsed.ignored)

    @staticmethod
    def to_listing_response(listing: Listing) -> ListingResponseDTO:
        """Converts a domain Listing to its REST shape; Decimal → str at the boundary."""
        return ListingResponseDTO(
            id=listing.id,
            title=listing.title,
            price=str(listing.price),
            make=listing.make,
            model=listing.model,
            year=listing.year,
            mileage=listing.mileage,
            fuel_type=listing.fuel_type,
            transmission=listing.transmission,
            body_type=listing.body_type,
            condition=listing.condition,
            color=listing.color,
            location=listing.location,
            city=listing.city,
            state=listing.state,
            country=listing.country,
            is_featured=listing.is_featured,
            view_count=listing.view_count,
            primary_image_url=listing.primary_image_url,
            created_at=listing.created_at,
        )

    @staticmethod
    def applied_filters(spec: FilterSpec) -> dict[str, Any]:
        """Facets in effect plus the resolved paging and sort, keyed by wire name."""
        applied = {
            name: str(value) if isinstance(value, Decimal) else value
            for name, value in spec.facets().items()
        }
        applied.update(
            page=spec.page,
            limit=spec.limit,
            sortBy=spec.sort_by.value,
            sortOrder=spec.sort_order.value,
        )
        return applied

    @staticmethod
    def to_response(envelope: ResultEnvelope) -> SearchResponseDTO:
        return SearchResponseDTO(
            items=[SearchMapper.to_listing_response(listing) for listing in envelope.items],
            pagination=PaginationDTO(
                page=envelope.pagination.page,
                limit=envelope.pagination.limit,
                total=envelope.pagination.total,
                total_pages=envelope.pagination.total_pages,
            ),
            applied_filters=SearchMapper.applied_filters(envelope.applied_filters),
            ignored_fields=[
                IgnoredFieldDTO(field=item.field, value=str(item.value), reason=item.reason)
                for item in envelope.ignored
            ],
        )
