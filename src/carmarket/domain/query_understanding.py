"""Deterministic reading of assistant utterances.

Keyword rules that classify what the user wants and pull search facets out
of free text. Used when no text-completion service is configured, and as the
intent classifier in every setup. Vocabulary-backed facets only match values
the metadata vocabulary currently knows.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from carmarket.domain.assistant import ExtractedQuery, UserIntent
from carmarket.domain.filters import parse_filter_spec
from carmarket.domain.metadata import MetadataKind, Vocabulary


# ==============================================================================
# Intent
# ==============================================================================

_COMPARE = re.compile(r"\b(compare|comparison|vs\.?|versus|difference between)\b", re.I)
_FAQ = re.compile(
    r"\b(how (do|can|does) (i|you|it)|financing|finance|warranty|return policy|test drive"
    r"|payment|pay|shipping|delivery|inspection|opening hours|contact|refund)\b",
    re.I,
)
_SPECS = re.compile(
    r"\b(specs?|specifications?|horsepower|hp|torque|mpg|fuel economy|engine|0-60|top speed)\b",
    re.I,
)
_LISTING = re.compile(
    r"(\$|\b(show|find|looking for|search|available|listings?|cars?|vehicles?|inventory"
    r"|in stock|buy|under|budget|cheap|cheapest|suvs?|trucks?|sedans?)\b)",
    re.I,
)


def classify_intent(utterance: str) -> UserIntent:
    """Map an utterance to the intent whose keywords it mentions first in priority order."""
    if _COMPARE.search(utterance):
        return UserIntent.CAR_COMPARE
    if _FAQ.search(utterance):
        return UserIntent.FAQ
    if _SPECS.search(utterance):
        return UserIntent.CAR_SPECS
    if _LISTING.search(utterance):
        return UserIntent.CAR_LISTING
    return UserIntent.FAQ


# ==============================================================================
# Facet extraction
# ==============================================================================

_AMOUNT = r"\$?\s?(\d{1,3}(?:,\d{3})+|\d+(?:\.\d+)?)\s*(k|thousand)?\b"
# A year is never part of an amount: no currency sign, separator or money unit around it
_YEAR = r"(?<![$\d,.])(?<!\$\s)(19[5-9]\d|20[0-4]\d)(?![,.]\d|\s*(?:k|thousand|dollars?|bucks)\b)"

_MILEAGE_MAX = re.compile(
    r"\b(?:under|below|less than|fewer than|max(?:imum)?|up to|at most)\s+"
    + _AMOUNT
    + r"\s*(?:miles|mi|km|kilometers|kilometres)\b",
    re.I,
)
_LOW_MILEAGE = re.compile(r"\blow[\s-]mileage\b", re.I)
LOW_MILEAGE_CEILING = 50000

_YEAR_BETWEEN = re.compile(rf"\bbetween\s+{_YEAR}\s+(?:and|to|-)\s+{_YEAR}\b", re.I)
_YEAR_AFTER = re.compile(rf"\b(after|newer than|since|from)\s+{_YEAR}\b", re.I)
_YEAR_BEFORE = re.compile(rf"\b(before|older than)\s+{_YEAR}\b", re.I)
_YEAR_OR_NEWER = re.compile(rf"\b{_YEAR}\s*(?:or newer|or later|and newer|and up|\+)", re.I)
_YEAR_OR_OLDER = re.compile(rf"\b{_YEAR}\s*(?:or older|or earlier|and older)\b", re.I)
_BARE_YEAR = re.compile(rf"\b{_YEAR}\b")

_PRICE_BETWEEN = re.compile(rf"\bbetween\s+{_AMOUNT}\s*(?:and|to|-)\s*{_AMOUNT}", re.I)
_PRICE_MAX = re.compile(
    r"\b(?:under|below|less than|cheaper than|max(?:imum)?|up to|at most|no more than"
    r"|within|budget of|budget)\s+" + _AMOUNT,
    re.I,
)
_PRICE_MIN = re.compile(
    r"\b(?:over|above|more than|at least|starting at|min(?:imum)?)\s+" + _AMOUNT, re.I
)
_BARE_PRICE = re.compile(r"\$\s?(\d{1,3}(?:,\d{3})+|\d+(?:\.\d+)?)\s*(k|thousand)?\b", re.I)

_LOCATION = re.compile(r"\b(?:in|near|around)\s+([A-Z][a-zA-Z]+(?:[\s-][A-Z][a-zA-Z]+)*)")

_GENERIC_LISTING_WORDS = re.compile(
    r"\b(cars?|vehicles?|autos?|listings?|inventory|available|show|find)\b", re.I
)

MAKE_ALIASES = {
    "chevy": "chevrolet",
    "vw": "volkswagen",
    "mercedes": "mercedes-benz",
    "benz": "mercedes-benz",
    "beemer": "bmw",
}

SYNONYMS: Mapping[MetadataKind, Mapping[str, str]] = {
    MetadataKind.BODY_TYPE: {
        "truck": "pickup",
        "trucks": "pickup",
        "pick-up": "pickup",
        "pickups": "pickup",
        "crossover": "suv",
        "crossovers": "suv",
        "estate": "wagon",
        "cabriolet": "convertible",
        "hatch": "hatchback",
    },
    MetadataKind.FUEL_TYPE: {
        "gas": "petrol",
        "gasoline": "petrol",
        "ev": "electric",
        "evs": "electric",
    },
    MetadataKind.TRANSMISSION: {
        "stick shift": "manual",
        "stick": "manual",
        "auto": "automatic",
    },
    MetadataKind.CAR_FEATURE: {
        "gps": "gps_navigation",
        "navigation": "gps_navigation",
        "leather": "leather_seats",
        "ac": "air_conditioning",
        "a/c": "air_conditioning",
    },
}

_FACET_KINDS = (
    ("bodyType", MetadataKind.BODY_TYPE),
    ("fuelType", MetadataKind.FUEL_TYPE),
    ("transmission", MetadataKind.TRANSMISSION),
    ("condition", MetadataKind.CONDITION),
)


@dataclass
class _Scan:
    """Utterance being consumed: matched spans are blanked so later rules skip them."""

    text: str

    def take(self, match: re.Match[str]) -> str:
        start, end = match.span()
        self.text = self.text[:start] + " " * (end - start) + self.text[end:]
        return match.group(0).strip()


def extract_query_keywords(utterance: str, vocabulary: Vocabulary) -> ExtractedQuery:
    """
    Read search facets out of an utterance with keyword rules.

    Args:
        utterance: Raw user text
        vocabulary: Metadata snapshot (makes, models, fuel/body/... values)

    Returns:
        ExtractedQuery whose filters went through parse_filter_spec; confidence
        grows with the number of facets found and is 0.0 when the utterance
        mentions neither facets nor listings at all
    """
    scan = _Scan(utterance)
    raw: dict[str, Any] = {}
    keywords: list[str] = []

    match = _MILEAGE_MAX.search(scan.text)
    if match:
        raw["mileageMax"] = str(int(_amount(match.group(1), match.group(2))))
        keywords.append(scan.take(match))
    else:
        match = _LOW_MILEAGE.search(scan.text)
        if match:
            raw["mileageMax"] = str(LOW_MILEAGE_CEILING)
            keywords.append(scan.take(match))

    keywords.extend(_extract_years(scan, raw))
    keywords.extend(_extract_prices(scan, raw))

    lowered = _Scan(scan.text.lower())

    make = _find_term(lowered, _forms(vocabulary.makes, MAKE_ALIASES))
    if make:
        raw["make"], keyword = make
        keywords.append(keyword)

    models = {model for model in vocabulary.models if not model.isdigit() and len(model) > 1}
    model = _find_term(lowered, _forms(models - vocabulary.makes, {}))
    if model:
        raw["model"], keyword = model
        keywords.append(keyword)

    for wire_name, kind in _FACET_KINDS:
        found = _find_term(lowered, _forms(vocabulary.values(kind), SYNONYMS.get(kind, {})))
        if found:
            raw[wire_name], keyword = found
            keywords.append(keyword)

    features: list[str] = []
    feature_forms = _forms(vocabulary.values(MetadataKind.CAR_FEATURE), SYNONYMS[MetadataKind.CAR_FEATURE])
    while found := _find_term(lowered, feature_forms):
        feature, keyword = found
        if feature not in features:
            features.append(feature)
        keywords.append(keyword)

    match = _LOCATION.search(scan.text)
    if match and match.group(1).lower() not in vocabulary.makes | vocabulary.models:
        raw["location"] = match.group(1)
        keywords.append(match.group(1))

    parsed = parse_filter_spec(raw)
    facet_count = len(parsed.spec.facets()) + len(features)

    if facet_count == 0 and not _GENERIC_LISTING_WORDS.search(utterance):
        confidence = 0.0
    else:
        confidence = min(0.95, 0.5 + 0.1 * facet_count)

    return ExtractedQuery(
        filters=parsed.spec,
        features=tuple(features),
        extracted_keywords=tuple(keywords),
        confidence=round(confidence, 2),
    )


def _extract_years(scan: _Scan, raw: dict[str, Any]) -> list[str]:
    keywords: list[str] = []

    match = _YEAR_BETWEEN.search(scan.text)
    if match:
        raw["yearMin"], raw["yearMax"] = match.group(1), match.group(2)
        return [scan.take(match)]

    match = _YEAR_AFTER.search(scan.text)
    if match:
        year = int(match.group(2))
        exclusive = match.group(1).lower() in ("after", "newer than")
        raw["yearMin"] = str(year + 1 if exclusive else year)
        keywords.append(scan.take(match))
    else:
        match = _YEAR_OR_NEWER.search(scan.text)
        if match:
            raw["yearMin"] = match.group(1)
            keywords.append(scan.take(match))

    match = _YEAR_BEFORE.search(scan.text)
    if match:
        raw["yearMax"] = str(int(match.group(2)) - 1)
        keywords.append(scan.take(match))
    else:
        match = _YEAR_OR_OLDER.search(scan.text)
        if match:
            raw["yearMax"] = match.group(1)
            keywords.append(scan.take(match))

    if not keywords:
        years = list(_BARE_YEAR.finditer(scan.text))
        if len(years) == 1:
            raw["yearMin"] = raw["yearMax"] = years[0].group(1)
            keywords.append(scan.take(years[0]))

    return keywords


def _extract_prices(scan: _Scan, raw: dict[str, Any]) -> list[str]:
    match = _PRICE_BETWEEN.search(scan.text)
    if match:
        low, high = _amount(match.group(1), match.group(2)), _amount(match.group(3), match.group(4))
        # "between 20 and 25 thousand": the trailing unit covers both ends
        if match.group(2) is None and match.group(4) and low < 1000:
            low *= 1000
        raw["priceMin"], raw["priceMax"] = str(low), str(high)
        return [scan.take(match)]

    keywords: list[str] = []

    match = _PRICE_MAX.search(scan.text)
    if match:
        raw["priceMax"] = str(_amount(match.group(1), match.group(2)))
        keywords.append(scan.take(match))

    match = _PRICE_MIN.search(scan.text)
    if match:
        raw["priceMin"] = str(_amount(match.group(1), match.group(2)))
        keywords.append(scan.take(match))

    if not keywords:
        match = _BARE_PRICE.search(scan.text)
        if match:
            raw["priceMax"] = str(_amount(match.group(1), match.group(2)))
            keywords.append(scan.take(match))

    return keywords


def _amount(number: str, multiplier: str | None) -> Decimal:
    value = Decimal(number.replace(",", ""))
    if multiplier:
        value *= 1000
    return value


def _forms(values: frozenset[str] | set[str], synonyms: Mapping[str, str]) -> dict[str, str]:
    """Surface forms (singular, plural, spaced, hyphenated) → canonical vocabulary value."""
    forms: dict[str, str] = {}
    for value in values:
        for surface in {value, value.replace("_", " "), value.replace("_", "-")}:
            forms[surface] = value
            forms[surface + "s"] = value
    for surface, canonical in synonyms.items():
        if canonical in values:
            forms.setdefault(surface, canonical)
    return forms


def _find_term(scan: _Scan, forms: Mapping[str, str]) -> tuple[str, str] | None:
    """Earliest, then longest, surface form present as a whole word; consumed on match."""
    best: re.Match[str] | None = None
    best_value = ""
    for surface in sorted(forms, key=len, reverse=True):
        match = re.search(rf"(?<![\w-]){re.escape(surface)}(?![\w-])", scan.text)
        if match and (best is None or match.start() < best.start()):
            best, best_value = match, forms[surface]
    if best is None:
        return None
    return best_value, scan.take(best)
