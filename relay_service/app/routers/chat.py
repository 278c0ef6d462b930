from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..chat_service import ChatService
from .. import schemas

router = APIRouter(prefix="/api/chat", tags=["chat"])

_ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    401: {"model": schemas.ErrorResponse},
    429: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


@router.post("", response_model=schemas.ChatResponse, responses=_ERROR_RESPONSES)
async def chat(
    payload: schemas.ChatRequest, service: ChatService = Depends(get_chat_service)
) -> schemas.ChatResponse:
    return await service.handle_chat(payload.message, payload.conversationId)


@router.delete(
    "/{conversation_id}",
    response_model=schemas.ClearResponse,
    responses={404: {"model": schemas.ErrorResponse}},
)
def clear_conversation(
    conversation_id: str, service: ChatService = Depends(get_chat_service)
) -> schemas.ClearResponse:
    service.clear(conversation_id)
    return schemas.ClearResponse(message="Conversation cleared")
