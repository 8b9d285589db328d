from pydantic import BaseModel
from typing import Literal, Optional


class ChatMessage(BaseModel):
    """A single prior turn in a counseling conversation."""

    role: Literal["user", "assistant"]
    content: str


class MentorRequest(BaseModel):
    """Input for the career mentor chat."""

    message: str
    history: list[ChatMessage] = []
    provider: Optional[str] = None
    model_key: Optional[str] = None


class MentorResponse(BaseModel):
    success: bool = True
    answer: str


class SummaryRequest(BaseModel):
    """Conversation to condense into a short user profile."""

    conversation: list[ChatMessage]
    provider: Optional[str] = None
    model_key: Optional[str] = None


class SummaryResponse(BaseModel):
    success: bool = True
    summary: str
