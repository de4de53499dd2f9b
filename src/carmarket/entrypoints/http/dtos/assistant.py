from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from carmarket.entrypoints.http.dtos.search import ListingResponseDTO


class AssistantQueryDTO(BaseModel):
    """Body of ``POST /assistant/query``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {"query": "Show me Toyota SUVs under $30,000", "conversationId": None}
        },
    )

    query: str = Field(min_length=1, max_length=500, description="User message")
    conversation_id: str | None = Field(default=None, description="Client conversation id, echoed to logs only")


class SuggestionChipDTO(BaseModel):
    id: str
    label: str
    query: str
    icon: str | None = None


class MessageActionDTO(BaseModel):
    label: str
    action: str
    data: dict[str, Any] = Field(default_factory=dict)


class AssistantListingDataDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    listings: list[ListingResponseDTO]
    total_count: int
    applied_filters: str


class AssistantResponseDTO(BaseModel):
    intent: str | None
    message: str
    data: AssistantListingDataDTO | None = None
    suggestions: list[SuggestionChipDTO] = Field(default_factory=list)
    actions: list[MessageActionDTO] = Field(default_factory=list)
