"""Conversation memory and context compaction."""

from .models import ConversationTurn, ConversationSummary, now_ms
from .conversation_store import ConversationStore
from .context_manager import ContextCompactor, SummaryCache, estimate_tokens

__all__ = [
    "ConversationTurn",
    "ConversationSummary",
    "now_ms",
    "ConversationStore",
    "ContextCompactor",
    "SummaryCache",
    "estimate_tokens",
]
