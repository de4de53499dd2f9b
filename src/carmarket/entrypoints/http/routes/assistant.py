from fastapi import APIRouter, Depends

from carmarket.entrypoints.http.dependencies import get_answer_assistant_query_use_case
from carmarket.entrypoints.http.dtos.assistant import AssistantQueryDTO, AssistantResponseDTO
from carmarket.entrypoints.http.mappers.assistant_mapper import AssistantMapper
from carmarket.use_cases.answer_assistant_query import AnswerAssistantQuery, welcome


router = APIRouter(prefix="/assistant", tags=["Assistant"])


@router.post(
    "/query",
    response_model=AssistantResponseDTO,
    summary="Ask the shopping assistant",
    description="""
    Answers a free-text message.

    Listing requests ("Show me Toyota SUVs under $30,000") are turned into a
    search; the response carries the top five listings, the total count and a
    description of the filters that were applied. Questions about specs,
    comparisons and policies are answered in text.

    Failures of the language model or the search never surface as errors:
    the assistant answers with a fallback message instead.
    """,
)
def query_assistant(
    body: AssistantQueryDTO,
    use_case: AnswerAssistantQuery = Depends(get_answer_assistant_query_use_case),
) -> AssistantResponseDTO:
    response = use_case.execute(AssistantMapper.to_domain_request(body))
    return AssistantMapper.to_response(response)


@router.get(
    "/welcome",
    response_model=AssistantResponseDTO,
    summary="Assistant greeting",
)
def assistant_welcome() -> AssistantResponseDTO:
    return AssistantMapper.to_response(welcome())
