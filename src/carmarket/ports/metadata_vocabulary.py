from __future__ import annotations

from abc import ABC, abstractmethod

from carmarket.domain.metadata import MetadataKind, Vocabulary


class MetadataVocabulary(ABC):
    """
    Port for the admin-managed metadata vocabulary.

    Read-only lookup. The set of values is open: admins can add entries at any
    time, so nothing downstream may hardcode it.

    Contract:
        - Values are returned lowercased (canonical form)
        - Only active entries are returned
    """

    @abstractmethod
    def values(self, kind: MetadataKind) -> frozenset[str]:
        """Active canonical values for one metadata kind."""
        ...

    @abstractmethod
    def makes(self) -> frozenset[str]:
        """Active car make names, lowercased."""
        ...

    @abstractmethod
    def models(self) -> frozenset[str]:
        """Active car model names across all makes, lowercased."""
        ...

    def snapshot(self) -> Vocabulary:
        """Read every kind once and freeze the result for this request."""
        return Vocabulary(
            entries={kind: self.values(kind) for kind in MetadataKind},
            makes=self.makes(),
            models=self.models(),
        )
