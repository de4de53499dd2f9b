"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
Only stateless singletons (the text-completion client) use lru_cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from carmarket.adapters.http_text_completion_service import HttpTextCompletionService
from carmarket.adapters.postgres_listing_search_repository import (
    PostgresListingSearchRepository,
)
from carmarket.adapters.postgres_metadata_vocabulary import PostgresMetadataVocabulary
from carmarket.infra.db.session import get_session
from carmarket.infra.llm.config import assistant_confidence_threshold, llm_settings
from carmarket.ports.text_completion import TextCompletionService
from carmarket.use_cases.answer_assistant_query import AnswerAssistantQuery
from carmarket.use_cases.extract_listing_query import ExtractListingQuery
from carmarket.use_cases.get_listing_by_id import GetListingById
from carmarket.use_cases.search_listings import SearchListings
from carmarket.use_cases.summarize_search_results import SummarizeSearchResults


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    The underlying get_session() commits on success, rolls back on exception
    and always closes the session.

    Yields:
        Session: SQLAlchemy database session (per-request)
    """
    with get_session() as session:
        yield session


@lru_cache(maxsize=1)
def get_text_completion_service() -> TextCompletionService | None:
    """Shared completion client, or None when no LLM_API_KEY is configured."""
    settings = llm_settings()
    if not settings.enabled:
        return None
    return HttpTextCompletionService(settings=settings)


def get_search_listings_use_case(db: Session = Depends(get_db)) -> SearchListings:
    """
    Factory function that returns a configured SearchListings use case.

    Called per-request so every request gets a fresh repository bound to its
    own session.
    """
    return SearchListings(
        listing_search_repository=PostgresListingSearchRepository(session=db),
        metadata_vocabulary=PostgresMetadataVocabulary(session=db),
    )


def get_listing_by_id_use_case(db: Session = Depends(get_db)) -> GetListingById:
    return GetListingById(listing_search_repository=PostgresListingSearchRepository(session=db))


def get_answer_assistant_query_use_case(
    db: Session = Depends(get_db),
    text_completion_service: TextCompletionService | None = Depends(get_text_completion_service),
) -> AnswerAssistantQuery:
    vocabulary = PostgresMetadataVocabulary(session=db)

    return AnswerAssistantQuery(
        extract_listing_query=ExtractListingQuery(
            metadata_vocabulary=vocabulary,
            text_completion_service=text_completion_service,
        ),
        search_listings=SearchListings(
            listing_search_repository=PostgresListingSearchRepository(session=db),
            metadata_vocabulary=vocabulary,
        ),
        summarize_search_results=SummarizeSearchResults(text_completion_service=text_completion_service),
        confidence_threshold=assistant_confidence_threshold(),
        text_completion_service=text_completion_service,
    )
