from __future__ import annotations

import math
from dataclasses import dataclass

from carmarket.domain.filters import FilterSpec, SortField, SortOrder
from carmarket.domain.listing import ListingField


_SORT_COLUMNS: dict[SortField, ListingField] = {
    SortField.CREATED_AT: ListingField.CREATED_AT,
    SortField.PRICE: ListingField.PRICE,
    SortField.MILEAGE: ListingField.MILEAGE,
    SortField.YEAR: ListingField.YEAR,
    SortField.VIEW_COUNT: ListingField.VIEW_COUNT,
}


@dataclass(frozen=True, slots=True)
class Sort:
    field: ListingField
    order: SortOrder

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC


@dataclass(frozen=True, slots=True)
class Paging:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def resolve_sort(sort_by: str | SortField | None, sort_order: str | SortOrder | None) -> Sort:
    """
    Resolve a requested sort, falling back instead of failing.

    Unknown fields fall back to createdAt, unknown orders to DESC.
    """
    try:
        field = SortField(sort_by) if sort_by is not None else SortField.CREATED_AT
    except ValueError:
        field = SortField.CREATED_AT

    try:
        order = SortOrder(sort_order.upper()) if isinstance(sort_order, str) else SortOrder.DESC
    except ValueError:
        order = SortOrder.DESC

    return Sort(field=_SORT_COLUMNS[field], order=order)


def sort_and_paging_for(spec: FilterSpec) -> tuple[Sort, Paging]:
    return resolve_sort(spec.sort_by, spec.sort_order), Paging(page=spec.page, limit=spec.limit)
