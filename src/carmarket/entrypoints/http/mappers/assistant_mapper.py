from __future__ import annotations

from carmarket.domain.assistant import AssistantResponse
from carmarket.entrypoints.http.dtos.assistant import (
    AssistantListingDataDTO,
    AssistantQueryDTO,
    AssistantResponseDTO,
    MessageActionDTO,
    SuggestionChipDTO,
)
from carmarket.entrypoints.http.mappers.search_mapper import SearchMapper
from carmarket.use_cases.answer_assistant_query import AnswerAssistantQueryRequest


class AssistantMapper:
    """Maps between REST DTOs and domain models for the assistant."""

    @staticmethod
    def to_domain_request(dto: AssistantQueryDTO) -> AnswerAssistantQueryRequest:
        return AnswerAssistantQueryRequest(query=dto.query, conversation_id=dto.conversation_id)

    @staticmethod
    def to_response(response: AssistantResponse) -> AssistantResponseDTO:
        data = None
        if response.data is not None:
            data = AssistantListingDataDTO(
                listings=[SearchMapper.to_listing_response(listing) for listing in response.data.listings],
                total_count=response.data.total_count,
                applied_filters=response.data.applied_filters,
            )

        return AssistantResponseDTO(
            intent=response.intent.value if response.intent is not None else None,
            message=response.message,
            data=data,
            suggestions=[
                SuggestionChipDTO(id=chip.id, label=chip.label, query=chip.query, icon=chip.icon)
                for chip in response.suggestions
            ],
            actions=[
                MessageActionDTO(label=action.label, action=action.action, data=dict(action.data))
                for action in response.actions
            ],
        )
