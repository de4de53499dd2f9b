from __future__ import annotations

from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from carmarket.adapters.in_memory_metadata_vocabulary import InMemoryMetadataVocabulary
from carmarket.adapters.postgres_metadata_vocabulary import PostgresMetadataVocabulary
from carmarket.domain.metadata import MetadataKind


# ==============================================================================
# In-memory
# ==============================================================================


def test_in_memory_values_are_lowercased() -> None:
    vocabulary = InMemoryMetadataVocabulary(
        entries={MetadataKind.BODY_TYPE: ["SUV", "Sedan"]},
        makes=["Toyota"],
        models=["RAV4"],
    )

    assert vocabulary.values(MetadataKind.BODY_TYPE) == frozenset({"suv", "sedan"})
    assert vocabulary.makes() == frozenset({"toyota"})
    assert vocabulary.models() == frozenset({"rav4"})


def test_in_memory_unknown_kind_is_empty() -> None:
    assert InMemoryMetadataVocabulary().values(MetadataKind.COLOR) == frozenset()


def test_snapshot_covers_every_kind(vocabulary: InMemoryMetadataVocabulary) -> None:
    snapshot = vocabulary.snapshot()

    assert set(snapshot.entries) == set(MetadataKind)
    assert snapshot.allows(MetadataKind.FUEL_TYPE, " Petrol ")
    assert not snapshot.allows(MetadataKind.FUEL_TYPE, "plutonium")
    assert "mercedes-benz" in snapshot.makes


# ==============================================================================
# PostgreSQL
# ==============================================================================


@pytest.fixture()
def mock_session() -> Mock:
    return Mock(spec=Session)


def test_postgres_values_returns_frozenset(mock_session: Mock) -> None:
    result = Mock()
    result.scalars.return_value.all.return_value = ["petrol", "diesel"]
    mock_session.execute.return_value = result

    vocabulary = PostgresMetadataVocabulary(mock_session)

    assert vocabulary.values(MetadataKind.FUEL_TYPE) == frozenset({"petrol", "diesel"})
    mock_session.execute.assert_called_once()


def test_postgres_snapshot_groups_kinds_from_a_single_query(mock_session: Mock) -> None:
    metadata_result = Mock()
    metadata_result.all.return_value = [
        ("fuel_type", "petrol"),
        ("fuel_type", "electric"),
        ("body_type", "suv"),
        ("price_type", "negotiable"),
    ]
    makes_result = Mock()
    makes_result.scalars.return_value.all.return_value = ["toyota"]
    models_result = Mock()
    models_result.scalars.return_value.all.return_value = ["rav4"]
    mock_session.execute.side_effect = [metadata_result, makes_result, models_result]

    snapshot = PostgresMetadataVocabulary(mock_session).snapshot()

    assert mock_session.execute.call_count == 3
    assert snapshot.values(MetadataKind.FUEL_TYPE) == frozenset({"petrol", "electric"})
    assert snapshot.values(MetadataKind.BODY_TYPE) == frozenset({"suv"})
    assert snapshot.values(MetadataKind.CONDITION) == frozenset()
    assert snapshot.makes == frozenset({"toyota"})
    assert snapshot.models == frozenset({"rav4"})
