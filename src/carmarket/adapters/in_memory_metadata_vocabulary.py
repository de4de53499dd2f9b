from __future__ import annotations

from collections.abc import Iterable, Mapping

from carmarket.domain.metadata import MetadataKind
from carmarket.ports.metadata_vocabulary import MetadataVocabulary


class InMemoryMetadataVocabulary(MetadataVocabulary):
    """Vocabulary held in memory; used by tests and local runs without a database."""

    def __init__(
        self,
        entries: Mapping[MetadataKind, Iterable[str]] | None = None,
        makes: Iterable[str] = (),
        models: Iterable[str] = (),
    ) -> None:
        self._entries = {
            kind: frozenset(value.lower() for value in values)
            for kind, values in (entries or {}).items()
        }
        self._makes = frozenset(make.lower() for make in makes)
        self._models = frozenset(model.lower() for model in models)

    def values(self, kind: MetadataKind) -> frozenset[str]:
        return self._entries.get(kind, frozenset())

    def makes(self) -> frozenset[str]:
        return self._makes

    def models(self) -> frozenset[str]:
        return self._models
