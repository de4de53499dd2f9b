from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ListingResponseDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    price: str
    make: str
    model: str
    year: int
    mileage: int | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    body_type: str | None = None
    condition: str | None = None
    color: str | None = None
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    is_featured: bool = False
    view_count: int = 0
    primary_image_url: str | None = None
    created_at: datetime


class SearchQueryDTO(BaseModel):
    """
    Query parameters for listing search.

    Every field is accepted as raw text: malformed values are dropped and
    reported in ``ignoredFields`` instead of failing the request.
    """

    query: str | None = Field(
        default=None,
        description="Free text matched against make, model and title",
        examples=["civic"],
    )
    make: str | None = Field(default=None, description="Make (case-insensitive substring)", examples=["Toyota"])
    model: str | None = Field(default=None, description="Model (case-insensitive substring)", examples=["RAV4"])
    year_min: str | None = Field(default=None, alias="yearMin", description="Minimum year (inclusive)", examples=["2018"])
    year_max: str | None = Field(default=None, alias="yearMax", description="Maximum year (inclusive)", examples=["2023"])
    price_min: str | None = Field(
        default=None,
        alias="priceMin",
        description="Minimum price (inclusive, decimal)",
        examples=["15000"],
    )
    price_max: str | None = Field(
        default=None,
        alias="priceMax",
        description="Maximum price (inclusive, decimal)",
        examples=["30000.00"],
    )
    mileage_max: str | None = Field(
        default=None,
        alias="mileageMax",
        description="Maximum mileage (inclusive)",
        examples=["60000"],
    )
    fuel_type: str | None = Field(
        default=None,
        alias="fuelType",
        description="Fuel type from the metadata vocabulary; unknown values match nothing",
        examples=["petrol"],
    )
    transmission: str | None = Field(default=None, description="Transmission type", examples=["automatic"])
    body_type: str | None = Field(default=None, alias="bodyType", description="Body type", examples=["suv"])
    condition: str | None = Field(default=None, description="Car condition", examples=["used"])
    location: str | None = Field(default=None, description="Location (substring)", examples=["Austin"])
    city: str | None = Field(default=None, description="City (substring)")
    state: str | None = Field(default=None, description="State (substring)")
    country: str | None = Field(default=None, description="Country (substring)")
    page: str | None = Field(default=None, description="1-based page number", examples=["1"])
    limit: str | None = Field(default=None, description="Page size, clamped to 1..48", examples=["10"])
    sort_by: str | None = Field(
        default=None,
        alias="sortBy",
        description="createdAt, price, mileage, year or viewCount",
        examples=["price"],
    )
    sort_order: str | None = Field(default=None, alias="sortOrder", description="ASC or DESC", examples=["ASC"])


class PaginationDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int


class IgnoredFieldDTO(BaseModel):
    field: str
    value: str
    reason: str


class SearchResponseDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: list[ListingResponseDTO]
    pagination: PaginationDTO
    applied_filters: dict[str, Any]
    ignored_fields: list[IgnoredFieldDTO] = Field(default_factory=list)
