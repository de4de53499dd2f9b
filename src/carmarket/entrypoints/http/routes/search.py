from fastapi import APIRouter, Depends, Request

from carmarket.entrypoints.http.dependencies import get_search_listings_use_case
from carmarket.entrypoints.http.dtos.search import SearchQueryDTO, SearchResponseDTO
from carmarket.entrypoints.http.error_responses import ErrorResponse
from carmarket.entrypoints.http.mappers.search_mapper import SearchMapper
from carmarket.use_cases.search_listings import SearchListings


router = APIRouter(tags=["Search"])


@router.get(
    "/search",
    response_model=SearchResponseDTO,
    summary="Search listings",
    description="""
    Faceted search over approved, active listings.

    ## Filters
    - All facets combine with AND semantics
    - `query`: free text, matches make OR model OR title
    - `make`, `model`, location fields: case-insensitive substring
    - `fuelType`, `transmission`, `bodyType`, `condition`: exact match against
      the metadata vocabulary; unknown values return zero results
    - Year/price/mileage: inclusive bounds

    ## Best effort
    Malformed values never fail the request. They are dropped and listed in
    `ignoredFields` with a reason.

    ## Pagination
    - Default limit: 10, max limit: 48
    - Pages past the end return empty `items` with the correct `total`

    ## Example
    ```
    GET /search?make=toyota&bodyType=suv&priceMax=30000&sortBy=price&sortOrder=ASC
    ```
    """,
    responses={
        200: {
            "description": "Successful response",
            "content": {
                "application/json": {
                    "example": {
                        "items": [
                            {
                                "id": "550e8400-e29b-41d4-a716-446655440000",
                                "title": "2021 Toyota RAV4 XLE",
                                "price": "27500.00",
                                "make": "Toyota",
                                "model": "RAV4",
                                "year": 2021,
                                "mileage": 32000,
                                "bodyType": "suv",
                                "createdAt": "2024-05-01T10:00:00Z",
                            }
                        ],
                        "pagination": {"page": 1, "limit": 10, "total": 1, "totalPages": 1},
                        "appliedFilters": {
                            "make": "toyota",
                            "bodyType": "suv",
                            "priceMax": "30000",
                            "page": 1,
                            "limit": 10,
                            "sortBy": "price",
                            "sortOrder": "ASC",
                        },
                        "ignoredFields": [],
                    }
                }
            },
        },
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
)
def search_listings(
    request: Request,
    query: SearchQueryDTO = Depends(),
    use_case: SearchListings = Depends(get_search_listings_use_case),
) -> SearchResponseDTO:
    """Search endpoint following parse → execute → map → return pattern."""
    # 1. Map to domain request (unknown parameters are reported, not dropped silently)
    domain_request = SearchMapper.to_domain_request(query, request.query_params)

    # 2. Execute use case
    envelope = use_case.execute(domain_request)

    # 3. Map to response
    return SearchMapper.to_response(envelope)
