"""PostgreSQL implementation of ListingSearchRepository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import false, func, or_, select
from sqlalchemy.orm import Session, contains_eager

from carmarket.domain.listing import Listing, ListingField, ListingStatus
from carmarket.domain.predicates import (
    Contains,
    Equals,
    MatchNone,
    Or,
    Predicate,
    RangeMax,
    RangeMin,
)
from carmarket.domain.sorting import Paging, Sort
from carmarket.infra.db.models import CarDetailRow, ListingRow
from carmarket.ports.listing_search_repository import ListingSearchRepository, SearchResult

if TYPE_CHECKING:
    from sqlalchemy.sql import ColumnElement, Select

logger = logging.getLogger(__name__)


_COLUMNS: dict[ListingField, Any] = {
    ListingField.TITLE: ListingRow.title,
    ListingField.PRICE: ListingRow.price,
    ListingField.STATUS: ListingRow.status,
    ListingField.IS_ACTIVE: ListingRow.is_active,
    ListingField.LOCATION: ListingRow.location,
    ListingField.CITY: ListingRow.city,
    ListingField.STATE: ListingRow.state,
    ListingField.COUNTRY: ListingRow.country,
    ListingField.CREATED_AT: ListingRow.created_at,
    ListingField.VIEW_COUNT: ListingRow.view_count,
    ListingField.MAKE: CarDetailRow.make,
    ListingField.MODEL: CarDetailRow.model,
    ListingField.YEAR: CarDetailRow.year,
    ListingField.MILEAGE: CarDetailRow.mileage,
    ListingField.FUEL_TYPE: CarDetailRow.fuel_type,
    ListingField.TRANSMISSION: CarDetailRow.transmission,
    ListingField.BODY_TYPE: CarDetailRow.body_type,
    ListingField.CONDITION: CarDetailRow.condition,
}


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """Translate one domain predicate into a SQLAlchemy boolean clause."""
    if isinstance(predicate, Or):
        return or_(*(compile_predicate(inner) for inner in predicate.predicates))
    if isinstance(predicate, MatchNone):
        return false()

    column = _COLUMNS[predicate.field]

    if isinstance(predicate, Equals):
        if isinstance(predicate.value, bool):
            return column.is_(predicate.value)
        return func.lower(column) == predicate.value
    if isinstance(predicate, Contains):
        # autoescape: user text with % or _ is matched literally
        return func.lower(column).contains(predicate.value, autoescape=True)
    if isinstance(predicate, RangeMin):
        return column >= predicate.value
    if isinstance(predicate, RangeMax):
        return column <= predicate.value

    raise TypeError(f"Unsupported predicate: {predicate!r}")


class PostgresListingSearchRepository(ListingSearchRepository):
    """
    PostgreSQL implementation of ListingSearchRepository.

    - Joins listing_details to car_details once; every predicate targets one of them
    - Compiles the predicate tuple ONCE and reuses the WHERE clause for both queries
    - Returns total_count via COUNT(*) over the filtered set
    - Converts ORM rows (infrastructure) to Listing (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def search(
        self,
        predicates: tuple[Predicate, ...],
        sort: Sort,
        paging: Paging,
    ) -> SearchResult:
        """
        Search listings with predicates, sort and paging.

        Executes two queries built from the same filtered statement:
        1. COUNT(*) to get total matching listings (before paging)
        2. SELECT with ORDER BY/OFFSET/LIMIT to get the page

        Note:
            The two queries are not wrapped in a stricter isolation level.
            A concurrent insert may skew total_count by one; this is accepted.
        """
        query = self._build_query(predicates)

        count_query = select(func.count()).select_from(query.subquery())
        total_count = self._session.execute(count_query).scalar() or 0

        page_query = (
            query.options(contains_eager(ListingRow.car_detail).selectinload(CarDetailRow.images))
            .order_by(*self._order_by(sort))
            .offset(paging.offset)
            .limit(paging.limit)
        )

        rows = self._session.execute(page_query).scalars().all()
        listings = [self._to_domain(row) for row in rows]

        logger.debug(
            "Listing search executed",
            extra={
                "predicate_count": len(predicates),
                "total_count": total_count,
                "returned": len(listings),
                "offset": paging.offset,
                "limit": paging.limit,
            },
        )

        return SearchResult(listings=listings, total_count=total_count)

    def get_by_id(self, listing_id: str) -> Listing | None:
        """
        Get listing by ID.

        Args:
            listing_id: Listing ID (expected to be a valid UUID string)

        Returns:
            Listing entity if found, None otherwise
        """
        try:
            query = (
                select(ListingRow)
                .join(ListingRow.car_detail)
                .options(
                    contains_eager(ListingRow.car_detail).selectinload(CarDetailRow.images)
                )
                .where(ListingRow.id == UUID(listing_id))
            )
        except ValueError:  # Invalid UUID format
            return None

        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def _build_query(self, predicates: tuple[Predicate, ...]) -> Select[tuple[ListingRow]]:
        clauses = [compile_predicate(predicate) for predicate in predicates]
        return select(ListingRow).join(ListingRow.car_detail).where(*clauses)

    def _order_by(self, sort: Sort) -> list[Any]:
        column = _COLUMNS[sort.field]
        direction = column.desc() if sort.descending else column.asc()
        # id as tie-breaker keeps pages stable across requests
        return [direction.nulls_last(), ListingRow.id.asc()]

    def _to_domain(self, row: ListingRow) -> Listing:
        """Convert ListingRow and its CarDetailRow into the Listing read model."""
        car = row.car_detail
        primary_image = next((image for image in car.images if image.is_primary), None)
        if primary_image is None and car.images:
            primary_image = car.images[0]

        return Listing(
            id=str(row.id),  # Convert UUID to string
            title=row.title,
            price=row.price,  # Already Decimal from NUMERIC column
            status=ListingStatus(row.status),
            is_active=row.is_active,
            is_featured=row.is_featured,
            view_count=row.view_count,
            created_at=row.created_at,
            location=row.location,
            city=row.city,
            state=row.state,
            country=row.country,
            make=car.make,
            model=car.model,
            year=car.year,
            body_type=car.body_type,
            fuel_type=car.fuel_type,
            transmission=car.transmission,
            mileage=car.mileage,
            color=car.color,
            condition=car.condition,
            primary_image_url=primary_image.url if primary_image else None,
            seller_id=str(row.seller_id) if row.seller_id else None,
        )
