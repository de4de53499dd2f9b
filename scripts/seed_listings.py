#!/usr/bin/env python3
"""
Seed the search tables with deterministic random data.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Mixed visibility: some listings are pending, sold or deactivated so the
  public-listing predicate has something to exclude

Usage:
    python scripts/seed_listings.py
"""

from __future__ import annotations

import random
import sys
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy import delete

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from carmarket.domain.metadata import MetadataKind
from carmarket.infra.db.models import (
    CarDetailRow,
    CarImageRow,
    CarMakeRow,
    CarMetadataRow,
    CarModelRow,
    ListingRow,
)
from carmarket.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_LISTINGS = 120
CURRENT_YEAR = 2025


# ==============================================================================
# Vocabulary
# ==============================================================================

METADATA = {
    MetadataKind.FUEL_TYPE: ["petrol", "diesel", "hybrid", "electric"],
    MetadataKind.TRANSMISSION: ["manual", "automatic", "cvt", "semi_automatic"],
    MetadataKind.BODY_TYPE: ["sedan", "suv", "hatchback", "pickup", "coupe", "convertible", "wagon"],
    MetadataKind.CONDITION: ["new", "used", "certified"],
    MetadataKind.COLOR: ["black", "white", "silver", "gray", "blue", "red"],
    MetadataKind.CAR_FEATURE: [
        "sunroof",
        "gps_navigation",
        "leather_seats",
        "backup_camera",
        "bluetooth",
        "heated_seats",
    ],
}

# Make → (price band, models with their body type)
CATALOG = {
    "Toyota": ("mid", {"Corolla": "sedan", "Camry": "sedan", "RAV4": "suv", "Tacoma": "pickup", "Highlander": "suv"}),
    "Honda": ("mid", {"Civic": "sedan", "Accord": "sedan", "CR-V": "suv", "Fit": "hatchback", "Pilot": "suv"}),
    "Ford": ("mid", {"Focus": "hatchback", "Escape": "suv", "Explorer": "suv", "F-150": "pickup", "Mustang": "coupe"}),
    "Chevrolet": ("economy", {"Malibu": "sedan", "Equinox": "suv", "Silverado": "pickup", "Spark": "hatchback"}),
    "Hyundai": ("economy", {"Elantra": "sedan", "Tucson": "suv", "Kona": "suv", "Ioniq": "hatchback"}),
    "Kia": ("economy", {"Rio": "sedan", "Sportage": "suv", "Soul": "wagon", "Niro": "suv"}),
    "BMW": ("premium", {"X3": "suv", "X5": "suv", "M4": "convertible"}),
    "Tesla": ("premium", {"Model S": "sedan", "Model Y": "suv"}),
    "Mazda": ("mid", {"CX-5": "suv", "MX-5": "convertible"}),
}

PRICE_BANDS = {
    "economy": (Decimal("18000"), Decimal("28000")),
    "mid": (Decimal("24000"), Decimal("40000")),
    "premium": (Decimal("45000"), Decimal("85000")),
}

LOCATIONS = [
    ("Austin, TX", "Austin", "Texas"),
    ("Denver, CO", "Denver", "Colorado"),
    ("Seattle, WA", "Seattle", "Washington"),
    ("Miami, FL", "Miami", "Florida"),
    ("Chicago, IL", "Chicago", "Illinois"),
    ("Phoenix, AZ", "Phoenix", "Arizona"),
]


# ==============================================================================
# Row Generation
# ==============================================================================


def calculate_price(band: str, year: int) -> Decimal:
    """Base price from the make's band, ~8% depreciation per year, rounded to 100."""
    low, high = PRICE_BANDS[band]
    base = Decimal(random.randint(int(low), int(high)))
    depreciation = min(Decimal("0.08") * (CURRENT_YEAR - year), Decimal("0.65"))
    price = base * (Decimal("1") - depreciation)
    return max((price / 100).quantize(Decimal("1")) * 100, Decimal("4000"))


def metadata_rows() -> list[CarMetadataRow]:
    rows = []
    for kind, values in METADATA.items():
        for position, value in enumerate(values):
            rows.append(
                CarMetadataRow(
                    type=kind.value,
                    value=value,
                    display_value=value.replace("_", " ").title(),
                    sort_order=position,
                )
            )
    return rows


def make_rows() -> list[CarMakeRow]:
    return [CarMakeRow(id=uuid.uuid4(), name=make.lower(), display_name=make) for make in CATALOG]


def model_rows(makes: list[CarMakeRow]) -> list[CarModelRow]:
    rows = []
    for make_row in makes:
        _, models = CATALOG[make_row.display_name]
        for model in models:
            rows.append(CarModelRow(make_id=make_row.id, name=model.lower(), display_name=model))
    return rows


def generate_listing(now: datetime) -> ListingRow:
    make = random.choice(list(CATALOG))
    band, models = CATALOG[make]
    model = random.choice(list(models))

    year = random.choices(range(2014, CURRENT_YEAR + 1), weights=[1, 1, 1, 2, 2, 3, 3, 4, 5, 6, 7, 6], k=1)[0]
    fuel_type = "electric" if make == "Tesla" else random.choices(METADATA[MetadataKind.FUEL_TYPE], weights=[7, 2, 2, 1], k=1)[0]
    years_old = CURRENT_YEAR - year
    mileage = 0 if years_old == 0 else random.randint(years_old * 6000, years_old * 15000)

    car = CarDetailRow(
        make=make,
        model=model,
        year=year,
        body_type=models[model],
        fuel_type=fuel_type,
        transmission=random.choices(METADATA[MetadataKind.TRANSMISSION], weights=[2, 7, 2, 1], k=1)[0],
        condition="new" if years_old == 0 else random.choice(["used", "used", "certified"]),
        color=random.choice(METADATA[MetadataKind.COLOR]),
        mileage=mileage,
    )
    car.images = [
        CarImageRow(
            url=f"https://images.carmarket.example/{make.lower()}/{model.lower().replace(' ', '-')}/{year}/{index}.jpg",
            is_primary=index == 0,
            sort_order=index,
        )
        for index in range(random.randint(1, 3))
    ]

    location, city, state = random.choice(LOCATIONS)
    status = random.choices(["approved", "pending", "rejected", "sold"], weights=[16, 2, 1, 1], k=1)[0]

    return ListingRow(
        title=f"{year} {make} {model}",
        price=calculate_price(band, year),
        status=status,
        is_active=random.random() > 0.05,
        is_featured=random.random() < 0.1,
        view_count=random.randint(0, 500),
        location=location,
        city=city,
        state=state,
        country="USA",
        car_detail=car,
        created_at=now - timedelta(days=random.randint(0, 180), minutes=random.randint(0, 1440)),
    )


def seed_listings(num_listings: int = NUM_LISTINGS, seed: int = RANDOM_SEED) -> None:
    """
    Seed the database with vocabulary and listing data.

    Args:
        num_listings: Number of listings to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)
    now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    print(f"🌱 Seeding database with {num_listings} listings (seed={seed})...")

    with get_session() as session:
        print("🗑️  Clearing existing data...")
        for table in (ListingRow, CarImageRow, CarDetailRow, CarModelRow, CarMakeRow, CarMetadataRow):
            session.execute(delete(table))

        print("📚 Inserting vocabulary...")
        session.add_all(metadata_rows())
        makes = make_rows()
        session.add_all(makes)
        session.flush()
        session.add_all(model_rows(makes))

        print(f"🚗 Generating {num_listings} listings...")
        listings = [generate_listing(now) for _ in range(num_listings)]
        session.add_all(listings)
        session.flush()

        public = sum(1 for listing in listings if listing.status == "approved" and listing.is_active)
        print(f"✅ Successfully seeded {len(listings)} listings ({public} publicly visible)!")

        print("\n📊 Sample listings:")
        for i, listing in enumerate(listings[:5], 1):
            print(f"   {i}. {listing.title} - ${listing.price:,.2f} [{listing.status}]")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_listings()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
