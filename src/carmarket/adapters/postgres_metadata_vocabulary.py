"""PostgreSQL implementation of MetadataVocabulary."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from carmarket.domain.metadata import MetadataKind, Vocabulary
from carmarket.infra.db.models import CarMakeRow, CarMetadataRow, CarModelRow
from carmarket.ports.metadata_vocabulary import MetadataVocabulary


class PostgresMetadataVocabulary(MetadataVocabulary):
    """Reads active vocabulary rows from car_metadata, car_makes and car_models."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def values(self, kind: MetadataKind) -> frozenset[str]:
        query = select(func.lower(CarMetadataRow.value)).where(
            CarMetadataRow.type == kind.value,
            CarMetadataRow.is_active.is_(True),
        )
        return frozenset(self._session.execute(query).scalars().all())

    def snapshot(self) -> Vocabulary:
        """Load every metadata kind in a single query instead of one per kind."""
        query = select(CarMetadataRow.type, func.lower(CarMetadataRow.value)).where(
            CarMetadataRow.is_active.is_(True)
        )
        grouped: dict[MetadataKind, set[str]] = {kind: set() for kind in MetadataKind}
        for type_, value in self._session.execute(query).all():
            try:
                grouped[MetadataKind(type_)].add(value)
            except ValueError:
                continue  # kinds this service does not search on (price_type, ...)

        return Vocabulary(
            entries={kind: frozenset(values) for kind, values in grouped.items()},
            makes=self.makes(),
            models=self.models(),
        )

    def makes(self) -> frozenset[str]:
        query = select(func.lower(CarMakeRow.name)).where(CarMakeRow.is_active.is_(True))
        return frozenset(self._session.execute(query).scalars().all())

    def models(self) -> frozenset[str]:
        query = select(func.lower(CarModelRow.name)).where(CarModelRow.is_active.is_(True))
        return frozenset(self._session.execute(query).scalars().all())
