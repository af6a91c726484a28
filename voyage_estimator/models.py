"""
DATA MODELS MODULE
==================

Pydantic models for the relay API and for the client-side conversation.
FastAPI uses the wire models to validate incoming JSON and to serialize
responses; the chat controller uses ConversationMessage for its own list.

MODELS:
  ChatMessage          - One role/content pair as sent over the wire.
  ChatRequest          - Body of POST /api/chat (the full conversation so far).
  ChatResponse         - Success body: the assistant's reply message.
  ErrorResponse        - Failure body: a single human-readable error string.
  ConversationMessage  - Client-side message with id and timestamp (never sent).
"""

from datetime import datetime
from typing import List, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from voyage_estimator.config import MAX_MESSAGE_LENGTH

Role = Literal["user", "assistant", "system"]
# The client list never holds the system prompt.
ClientRole = Literal["user", "assistant"]


# ==============================================================================
# WIRE MODELS
# ==============================================================================

class ChatMessage(BaseModel):
    """A single message in a conversation. Order in the list defines chronology."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = Field(..., max_length=MAX_MESSAGE_LENGTH)


class ChatRequest(BaseModel):
    """
    Request body for POST /api/chat.

    - messages: The full conversation so far, oldest first, ending with the new
      user message. The system prompt is added by the server, not the caller.
    """
    messages: List[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """Response body for a successful POST /api/chat."""
    message: ChatMessage


class ErrorResponse(BaseModel):
    """Response body for every failed POST /api/chat."""
    error: str


# ==============================================================================
# CLIENT-SIDE MODELS
# ==============================================================================

class ConversationMessage(BaseModel):
    """
    A message as the chat client keeps it: immutable once created.
    id and timestamp exist only on the client and are stripped before sending.
    """
    model_config = ConfigDict(frozen=True)

    role: ClientRole
    content: str
    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_wire(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)
