"""Pydantic schemas shared across relay routes."""
from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, Field


class Turn(BaseModel):
    role: Literal["user", "assistant"]
    content: str

    class Config:
        frozen = True


class ChatRequest(BaseModel):
    message: Optional[str] = None
    conversationId: Optional[str] = Field(
        default=None, description="Identifier returned by a previous call"
    )


class ChatResponse(BaseModel):
    message: str
    conversationId: str


class ClearResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    activeConversations: int
