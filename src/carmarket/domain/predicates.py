"""Predicate model and the FilterSpec → predicate translation.

A search is an ordered conjunction (AND) of predicates. Each facet of a
FilterSpec contributes exactly one predicate; only the free-text facet uses a
disjunction, and only internally across make/model/title.

Predicates are plain frozen values with no reference to any storage engine,
so the same tuple drives the SQL adapter, the in-memory adapter and any cache
keyed by it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from carmarket.domain.filters import FilterSpec
from carmarket.domain.listing import ListingField, ListingStatus
from carmarket.domain.metadata import MetadataKind, Vocabulary


@dataclass(frozen=True, slots=True)
class Equals:
    """Case-normalized equality. String values are stored lowercased."""

    field: ListingField
    value: str | bool


@dataclass(frozen=True, slots=True)
class Contains:
    """Case-insensitive substring containment. Value is stored lowercased."""

    field: ListingField
    value: str


@dataclass(frozen=True, slots=True)
class RangeMin:
    """Inclusive lower bound."""

    field: ListingField
    value: int | Decimal


@dataclass(frozen=True, slots=True)
class RangeMax:
    """Inclusive upper bound."""

    field: ListingField
    value: int | Decimal


@dataclass(frozen=True, slots=True)
class Or:
    predicates: tuple[Predicate, ...]


@dataclass(frozen=True, slots=True)
class MatchNone:
    """Contributed by an exact-match facet whose value is not in the vocabulary."""

    field: ListingField
    value: str


Predicate = Union[Equals, Contains, RangeMin, RangeMax, Or, MatchNone]


# Always conjoined, regardless of caller input
PUBLIC_LISTING_PREDICATES: tuple[Predicate, ...] = (
    Equals(ListingField.STATUS, ListingStatus.APPROVED.value),
    Equals(ListingField.IS_ACTIVE, True),
)

FREE_TEXT_FIELDS = (ListingField.MAKE, ListingField.MODEL, ListingField.TITLE)

_PARTIAL_MATCH_FACETS = (
    ("make", ListingField.MAKE),
    ("model", ListingField.MODEL),
    ("location", ListingField.LOCATION),
    ("city", ListingField.CITY),
    ("state", ListingField.STATE),
    ("country", ListingField.COUNTRY),
)

_RANGE_FACETS = (
    ("year_min", RangeMin, ListingField.YEAR),
    ("year_max", RangeMax, ListingField.YEAR),
    ("price_min", RangeMin, ListingField.PRICE),
    ("price_max", RangeMax, ListingField.PRICE),
    ("mileage_max", RangeMax, ListingField.MILEAGE),
)

_EXACT_MATCH_FACETS = (
    ("fuel_type", ListingField.FUEL_TYPE, MetadataKind.FUEL_TYPE),
    ("transmission", ListingField.TRANSMISSION, MetadataKind.TRANSMISSION),
    ("body_type", ListingField.BODY_TYPE, MetadataKind.BODY_TYPE),
    ("condition", ListingField.CONDITION, MetadataKind.CONDITION),
)


def build_predicates(spec: FilterSpec, vocabulary: Vocabulary) -> tuple[Predicate, ...]:
    """
    Translate a FilterSpec into an ordered conjunction of predicates.

    Pure and deterministic: the same spec and vocabulary always yield an
    equal tuple, in a fixed facet order independent of how the spec was built.

    Args:
        spec: Parsed filter spec
        vocabulary: Metadata snapshot used to vet exact-match facets

    Returns:
        Tuple of predicates; the public-listing predicates always come first
    """
    predicates: list[Predicate] = list(PUBLIC_LISTING_PREDICATES)

    if spec.query is not None:
        term = spec.query.lower()
        predicates.append(Or(tuple(Contains(field, term) for field in FREE_TEXT_FIELDS)))

    for attr, field in _PARTIAL_MATCH_FACETS:
        value = getattr(spec, attr)
        if value is not None:
            predicates.append(Contains(field, value.lower()))

    for attr, kind, field in _RANGE_FACETS:
        value = getattr(spec, attr)
        if value is not None:
            predicates.append(kind(field, value))

    for attr, field, metadata_kind in _EXACT_MATCH_FACETS:
        value = getattr(spec, attr)
        if value is None:
            continue
        if vocabulary.allows(metadata_kind, value):
            predicates.append(Equals(field, value.strip().lower()))
        else:
            predicates.append(MatchNone(field, value))

    return tuple(predicates)
