from fastapi import APIRouter, Depends

from carmarket.entrypoints.http.dependencies import get_listing_by_id_use_case
from carmarket.entrypoints.http.dtos.search import ListingResponseDTO
from carmarket.entrypoints.http.error_responses import ErrorResponse
from carmarket.entrypoints.http.mappers.search_mapper import SearchMapper
from carmarket.use_cases.get_listing_by_id import GetListingById, GetListingByIdRequest


router = APIRouter(tags=["Listings"])


@router.get(
    "/listings/{listing_id}",
    response_model=ListingResponseDTO,
    summary="Get a listing",
    description="Returns one approved, active listing. Other listings are reported as not found.",
    responses={
        404: {"model": ErrorResponse, "description": "Listing not found"},
        422: {"model": ErrorResponse, "description": "listing_id is not a UUID"},
    },
)
def get_listing(
    listing_id: str,
    use_case: GetListingById = Depends(get_listing_by_id_use_case),
) -> ListingResponseDTO:
    result = use_case.execute(GetListingByIdRequest(listing_id=listing_id))
    return SearchMapper.to_listing_response(result.listing)
