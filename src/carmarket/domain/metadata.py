from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class MetadataKind(str, Enum):
    FUEL_TYPE = "fuel_type"
    TRANSMISSION = "transmission_type"
    BODY_TYPE = "body_type"
    CONDITION = "condition"
    COLOR = "color"
    CAR_FEATURE = "car_feature"


@dataclass(frozen=True)
class Vocabulary:
    """
    Point-in-time copy of the admin-managed metadata vocabulary.

    Values are stored lowercased. Taken once per request so that every
    consumer in that request sees the same vocabulary.
    """

    entries: Mapping[MetadataKind, frozenset[str]] = field(default_factory=dict)
    makes: frozenset[str] = frozenset()
    models: frozenset[str] = frozenset()

    def values(self, kind: MetadataKind) -> frozenset[str]:
        return self.entries.get(kind, frozenset())

    def allows(self, kind: MetadataKind, value: str) -> bool:
        return value.strip().lower() in self.values(kind)
