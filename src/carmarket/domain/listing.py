from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ListingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    INACTIVE = "inactive"
    SOLD = "sold"


class ListingField(str, Enum):
    """
    Searchable and sortable columns of the listing read model.

    Adapters map each field to the table that stores it.
    """

    TITLE = "title"
    PRICE = "price"
    STATUS = "status"
    IS_ACTIVE = "is_active"
    LOCATION = "location"
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"
    CREATED_AT = "created_at"
    VIEW_COUNT = "view_count"

    MAKE = "make"
    MODEL = "model"
    YEAR = "year"
    MILEAGE = "mileage"
    FUEL_TYPE = "fuel_type"
    TRANSMISSION = "transmission"
    BODY_TYPE = "body_type"
    CONDITION = "condition"


@dataclass(frozen=True)
class Listing:
    """Read model for search: a listing with its car attributes denormalized."""

    id: str
    title: str
    price: Decimal
    status: ListingStatus
    is_active: bool
    created_at: datetime
    make: str
    model: str
    year: int
    is_featured: bool = False
    view_count: int = 0
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    body_type: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    mileage: int | None = None
    color: str | None = None
    condition: str | None = None
    primary_image_url: str | None = None
    seller_id: str | None = None

    @property
    def is_publicly_visible(self) -> bool:
        return self.status is ListingStatus.APPROVED and self.is_active

    @property
    def display_name(self) -> str:
        return f"{self.year} {self.make} {self.model}"

    def value_of(self, field: ListingField) -> object:
        """Column value for a searchable field, enums unwrapped to their stored value."""
        value = getattr(self, field.value)
        if isinstance(value, Enum):
            return value.value
        return value
