from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from carmarket.domain.errors import ValidationError

logger = logging.getLogger(__name__)


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 48

# Column limits of the listing store: INTEGER for year/mileage, NUMERIC(12, 2)
# for price, BIGINT for the page offset.
MAX_INTEGER_FACET = 2**31 - 1
MAX_PRICE = Decimal("9999999999.99")
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


class FilterValidationError(ValidationError):
    """Raised when a FilterSpec is constructed with values of the wrong type."""

    pass


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    PRICE = "price"
    MILEAGE = "mileage"
    YEAR = "year"
    VIEW_COUNT = "viewCount"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """
    Canonical, validated search intent.

    Every facet is optional. A spec with no facets means "all public listings".
    Range pairs are kept as given: an inverted pair simply matches nothing.
    """

    query: str | None = None
    make: str | None = None
    model: str | None = None
    year_min: int | None = None
    year_max: int | None = None
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    mileage_max: int | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    body_type: str | None = None
    condition: str | None = None
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    def validate(self) -> None:
        """
        Guard against specs built in code with the wrong types.

        Specs produced by ``parse_filter_spec`` always pass.

        Raises:
            FilterValidationError: If a value has the wrong type or domain
        """
        # Guardrails: prevent float leakage past boundary
        for name in ("price_min", "price_max"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Decimal):
                raise FilterValidationError(
                    f"{name} must be Decimal or None (no floats past the boundary)"
                )
            if value is not None and value < 0:
                raise FilterValidationError(f"{name} must be >= 0")
        if self.mileage_max is not None and self.mileage_max < 0:
            raise FilterValidationError("mileage_max must be >= 0")
        if self.page < 1:
            raise FilterValidationError("page must be >= 1")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise FilterValidationError(f"limit must be between 1 and {MAX_LIMIT}")

    def facets(self) -> dict[str, Any]:
        """Facets that are set, keyed by wire (camelCase) name."""
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name in _PAGING_FIELDS:
                continue
            value = getattr(self, f.name)
            if value is not None:
                result[_WIRE_NAMES[f.name]] = value
        return result

    @property
    def is_unfiltered(self) -> bool:
        return not self.facets()


@dataclass(frozen=True, slots=True)
class IgnoredField:
    """A raw input key that did not make it into the spec as given."""

    field: str
    value: Any
    reason: str


@dataclass(frozen=True, slots=True)
class FilterSpecParseResult:
    spec: FilterSpec
    ignored: tuple[IgnoredField, ...] = field(default_factory=tuple)


_PAGING_FIELDS = frozenset({"page", "limit", "sort_by", "sort_order"})

_WIRE_NAMES = {
    "query": "query",
    "make": "make",
    "model": "model",
    "year_min": "yearMin",
    "year_max": "yearMax",
    "price_min": "priceMin",
    "price_max": "priceMax",
    "mileage_max": "mileageMax",
    "fuel_type": "fuelType",
    "transmission": "transmission",
    "body_type": "bodyType",
    "condition": "condition",
    "location": "location",
    "city": "city",
    "state": "state",
    "country": "country",
    "page": "page",
    "limit": "limit",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
}
_ATTRIBUTE_NAMES = {wire: attr for attr, wire in _WIRE_NAMES.items()}

_TEXT_FIELDS = frozenset(
    {
        "query",
        "make",
        "model",
        "fuel_type",
        "transmission",
        "body_type",
        "condition",
        "location",
        "city",
        "state",
        "country",
    }
)
_INTEGER_FIELDS = frozenset({"year_min", "year_max", "mileage_max"})
_INTEGER_PATTERN = re.compile(r"^[+-]?\d{1,30}$", re.ASCII)
_MAX_DECIMAL_PLACES = 6
_DECIMAL_FIELDS = frozenset({"price_min", "price_max"})


def parse_filter_spec(raw: Mapping[str, Any]) -> FilterSpecParseResult:
    """
    Build a FilterSpec from untyped key/value input, best effort.

    Accepts HTTP query parameters or extracted entities keyed by wire name.
    Malformed facets are dropped and reported, paging values are clamped,
    unknown sort values fall back to the defaults. Never raises on bad input.

    Args:
        raw: Mapping of wire (camelCase) names to raw values

    Returns:
        FilterSpecParseResult with the spec and every ignored or adjusted field
    """
    values: dict[str, Any] = {}
    ignored: list[IgnoredField] = []

    for key, value in raw.items():
        attr = _ATTRIBUTE_NAMES.get(key)
        if attr is None:
            ignored.append(IgnoredField(key, value, "unknown_field"))
            continue
        if value is None or (isinstance(value, str) and not value.strip()):
            continue  # blank means "not set"

        if attr in _TEXT_FIELDS:
            if not isinstance(value, str):
                ignored.append(IgnoredField(key, value, "invalid_text"))
            else:
                values[attr] = value.strip()
        elif attr in _INTEGER_FIELDS:
            number = _parse_int(value)
            if number is None:
                ignored.append(IgnoredField(key, value, "invalid_integer"))
            elif attr == "mileage_max" and number < 0:
                ignored.append(IgnoredField(key, value, "negative_value"))
            elif abs(number) > MAX_INTEGER_FACET:
                ignored.append(IgnoredField(key, value, "out_of_range"))
            else:
                values[attr] = number
        elif attr in _DECIMAL_FIELDS:
            amount = _parse_decimal(value)
            if amount is None:
                ignored.append(IgnoredField(key, value, "invalid_decimal"))
            elif amount < 0:
                ignored.append(IgnoredField(key, value, "negative_value"))
            elif amount > MAX_PRICE:
                ignored.append(IgnoredField(key, value, "out_of_range"))
            else:
                values[attr] = amount
        elif attr == "page":
            page = _parse_int(value)
            if page is None:
                ignored.append(IgnoredField(key, value, "invalid_integer"))
            elif not 1 <= page <= MAX_PAGE:
                ignored.append(IgnoredField(key, value, "clamped"))
                values["page"] = min(max(page, 1), MAX_PAGE)
            else:
                values["page"] = page
        elif attr == "limit":
            limit = _parse_int(value)
            if limit is None:
                ignored.append(IgnoredField(key, value, "invalid_integer"))
            else:
                clamped = min(max(limit, 1), MAX_LIMIT)
                if clamped != limit:
                    ignored.append(IgnoredField(key, value, "clamped"))
                values["limit"] = clamped
        elif attr == "sort_by":
            try:
                values["sort_by"] = SortField(str(value).strip())
            except ValueError:
                ignored.append(IgnoredField(key, value, "unsupported_sort_field"))
        elif attr == "sort_order":
            try:
                values["sort_order"] = SortOrder(str(value).strip().upper())
            except ValueError:
                ignored.append(IgnoredField(key, value, "unsupported_sort_order"))

    for item in ignored:
        logger.info(
            "Search facet ignored",
            extra={"field": item.field, "value": repr(item.value), "reason": item.reason},
        )

    return FilterSpecParseResult(spec=FilterSpec(**values), ignored=tuple(ignored))


def _parse_int(value: Any) -> int | None:
    # bool is an int subclass; "true" is never a year
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def _parse_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = str(value)
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$")
    if not isinstance(value, (str, int, Decimal)):
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount.as_tuple().exponent < -_MAX_DECIMAL_PLACES:
        return None
    return amount
