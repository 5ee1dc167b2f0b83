"""Memory data models."""

import time
from typing import Optional
from pydantic import BaseModel, Field


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


class ConversationTurn(BaseModel):
    """A single turn in a conversation."""
    role: str  # "user" or "assistant"
    content: str
    name: Optional[str] = None  # Author display name for user turns
    timestamp: int = Field(default_factory=now_ms)  # Epoch milliseconds


class ConversationSummary(BaseModel):
    """Cached summary of the older part of a conversation."""
    conversation_id: str
    summary: str
    summarized_count: int
    last_summarized_timestamp: int = 0
