"""Get listing by ID use case."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from carmarket.domain.errors import NotFoundError, ValidationError
from carmarket.domain.listing import Listing
from carmarket.ports.listing_search_repository import ListingSearchRepository


@dataclass(frozen=True, slots=True)
class GetListingByIdRequest:
    listing_id: str


@dataclass(frozen=True, slots=True)
class GetListingByIdResponse:
    listing: Listing


class GetListingById:
    """
    Use case for retrieving a single public listing by ID.

    Responsibilities:
    - Validate listing_id format (must be valid UUID)
    - Delegate to repository for data access
    - Raise NotFoundError if the listing doesn't exist or is not public
      (pending, rejected, sold or deactivated listings are not disclosed)
    """

    def __init__(self, listing_search_repository: ListingSearchRepository) -> None:
        self._repository = listing_search_repository

    def execute(self, request: GetListingByIdRequest) -> GetListingByIdResponse:
        """
        Raises:
            ValidationError: If listing_id is not a valid UUID format
            NotFoundError: If no public listing has this ID
        """
        try:
            UUID(request.listing_id)
        except ValueError:
            raise ValidationError(
                errors=[
                    {
                        "field": "listing_id",
                        "message": "Must be a valid UUID format",
                        "code": "INVALID_UUID",
                    }
                ]
            )

        listing = self._repository.get_by_id(request.listing_id)

        if listing is None or not listing.is_publicly_visible:
            raise NotFoundError(resource="Listing", identifier=request.listing_id)

        return GetListingByIdResponse(listing=listing)
