"""Shared fixtures: listing factory and a small public vocabulary."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from carmarket.adapters.in_memory_metadata_vocabulary import InMemoryMetadataVocabulary
from carmarket.domain.listing import Listing, ListingStatus
from carmarket.domain.metadata import MetadataKind

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_listing() -> Callable[..., Listing]:
    """Factory for public listings; any field can be overridden."""
    counter = {"n": 0}

    def factory(**overrides: Any) -> Listing:
        counter["n"] += 1
        n = counter["n"]
        values: dict[str, Any] = {
            "id": f"00000000-0000-0000-0000-{n:012d}",
            "title": f"Listing {n}",
            "price": Decimal("20000.00"),
            "status": ListingStatus.APPROVED,
            "is_active": True,
            "created_at": BASE_TIME + timedelta(hours=n),
            "make": "Toyota",
            "model": "Corolla",
            "year": 2020,
            "mileage": 30000,
            "body_type": "sedan",
            "fuel_type": "petrol",
            "transmission": "automatic",
            "condition": "used",
        }
        values.update(overrides)
        return Listing(**values)

    return factory


@pytest.fixture
def vocabulary() -> InMemoryMetadataVocabulary:
    return InMemoryMetadataVocabulary(
        entries={
            MetadataKind.FUEL_TYPE: ["petrol", "diesel", "hybrid", "electric"],
            MetadataKind.TRANSMISSION: ["manual", "automatic", "cvt", "semi_automatic"],
            MetadataKind.BODY_TYPE: ["sedan", "suv", "hatchback", "pickup", "coupe"],
            MetadataKind.CONDITION: ["new", "used", "certified"],
            MetadataKind.CAR_FEATURE: ["sunroof", "gps_navigation", "leather_seats"],
        },
        makes=["Toyota", "Honda", "Ford", "BMW", "Mercedes-Benz"],
        models=["Corolla", "Camry", "RAV4", "Civic", "CR-V", "F-150", "X5"],
    )
