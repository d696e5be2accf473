from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: ChatRole
    content: str = Field(..., max_length=8000)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class MoodRequest(BaseModel):
    message: str = Field("", max_length=8000)


class MoodResponse(BaseModel):
    mood: str
    reply: str
    suggestions: List[str]
    counts: Dict[str, int]
    matched: Dict[str, List[str]]


class WelcomeResponse(BaseModel):
    message: str


class ConversationContextPayload(BaseModel):
    mood: Optional[str] = None
    previousTopics: List[str] = Field(default_factory=list)
    sessionStart: Optional[str] = None
    messageCount: int = Field(0, ge=0)
