"""Conversation context manager for LLM context window management."""

import math
import logging
import threading
from collections import OrderedDict
from typing import List, Optional, Tuple

from .models import ConversationTurn, ConversationSummary
from llm.base_client import BaseLLMClient, Message

logger = logging.getLogger(__name__)

SummaryKey = Tuple[str, int, int]


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters."""
    return math.ceil(len(text or "") / 4)


def to_context_message(turn: ConversationTurn) -> Message:
    """Map a stored turn to an LLM message."""
    return Message(
        role="user" if turn.role == "user" else "assistant",
        content=turn.content or "content not found"
    )


class SummaryCache:
    """
    Bounded summary cache with insertion-order trimming.

    Once more than `max_entries` summaries are stored, only the
    `keep_entries` most recently inserted survive.
    """

    def __init__(self, max_entries: int = 100, keep_entries: int = 50):
        self.max_entries = max_entries
        self.keep_entries = keep_entries
        self._entries: "OrderedDict[SummaryKey, ConversationSummary]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: SummaryKey) -> Optional[ConversationSummary]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: SummaryKey, summary: ConversationSummary) -> None:
        with self._lock:
            self._entries[key] = summary
            if len(self._entries) > self.max_entries:
                for old_key in list(self._entries.keys())[:-self.keep_entries]:
                    del self._entries[old_key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ContextCompactor:
    """
    Builds a token-bounded prompt context from conversation history.

    Short histories are passed through. Longer ones keep the most recent
    turns verbatim and replace everything older with a cached LLM summary
    delivered as a single system message.
    """

    RECENT_WINDOW = 6  # Turns always kept verbatim
    DEFAULT_MAX_TOKENS = 1500

    SUMMARY_SYSTEM_PROMPT = "You are a conversation summarizer. Create concise, informative summaries."

    SUMMARY_PROMPT = """Summarize the following conversation history in 2-3 sentences, focusing on:
1. Key questions asked by the user
2. Main topics discussed
3. Any important context or ongoing issues

Conversation:
{conversation}

Keep the summary concise and focused on information that might be relevant for future responses."""

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient] = None,
        recent_window: int = RECENT_WINDOW,
        summary_cache: Optional[SummaryCache] = None
    ):
        """
        Initialize context compactor.

        Args:
            llm_client: LLM client for summarization
            recent_window: Number of trailing turns kept verbatim
            summary_cache: Optional shared summary cache
        """
        self.llm_client = llm_client
        self.recent_window = recent_window
        self.summary_cache = summary_cache or SummaryCache()

    def get_bounded_context(
        self,
        conversation_id: str,
        history: List[ConversationTurn],
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> List[Message]:
        """
        Get messages for the LLM context window.

        Args:
            conversation_id: Conversation ID
            history: Stored turns, oldest first
            max_tokens: Soft token budget for the returned messages

        Returns:
            Ordered list of Message objects
        """
        if not history:
            return []

        try:
            messages = self._get_compacted_messages(conversation_id, history)
        except Exception as e:
            logger.warning(f"Context compaction failed for {conversation_id}, using recent turns: {e}")
            messages = [to_context_message(turn) for turn in history[-self.recent_window:]]

        return self._apply_token_budget(messages, max_tokens)

    def _get_compacted_messages(
        self,
        conversation_id: str,
        history: List[ConversationTurn]
    ) -> List[Message]:
        """Summarize old turns and keep recent ones verbatim."""
        if len(history) <= self.recent_window:
            return [to_context_message(turn) for turn in history]

        old_turns = history[:-self.recent_window]
        recent_turns = history[-self.recent_window:]

        messages = []
        summary = self.get_summary(conversation_id, old_turns)
        if summary:
            messages.append(Message(
                role="system",
                content=f"Previous conversation summary: {summary}"
            ))

        messages.extend(to_context_message(turn) for turn in recent_turns)

        logger.info(
            f"Compacted context: {len(old_turns)} old messages summarized, "
            f"{len(recent_turns)} recent messages kept"
        )
        return messages

    def get_summary(
        self,
        conversation_id: str,
        old_turns: List[ConversationTurn]
    ) -> Optional[str]:
        """
        Get (or create and cache) a summary of older turns.

        The cache key includes the timestamp of the newest summarized turn,
        so a history that has reached its retention cap (same old-turn count,
        different turns) still gets a fresh summary.

        Returns:
            Summary text, or None if summarization failed
        """
        key = (conversation_id, len(old_turns), old_turns[-1].timestamp)
        cached = self.summary_cache.get(key)
        if cached:
            return cached.summary

        if not self.llm_client:
            logger.warning("No LLM client available for summarization")
            return None

        try:
            summary = self._generate_summary(old_turns)
        except Exception as e:
            logger.warning(f"Failed to summarize conversation {conversation_id}: {e}")
            return None

        if summary:
            self.summary_cache.put(key, ConversationSummary(
                conversation_id=conversation_id,
                summary=summary,
                summarized_count=len(old_turns),
                last_summarized_timestamp=old_turns[-1].timestamp
            ))
        return summary or None

    def _generate_summary(self, turns: List[ConversationTurn]) -> str:
        """Use the LLM to summarize turns."""
        conversation_text = "\n".join(
            f"{'User' if turn.role == 'user' else 'Assistant'}: {turn.content}"
            for turn in turns
        )

        response = self.llm_client.chat(
            messages=[
                Message(role="system", content=self.SUMMARY_SYSTEM_PROMPT),
                Message(role="user", content=self.SUMMARY_PROMPT.format(conversation=conversation_text))
            ],
            temperature=0.3,
            max_tokens=150
        )
        return response.content.strip()

    def _apply_token_budget(self, messages: List[Message], max_tokens: int) -> List[Message]:
        """Keep the newest messages that fit the budget, always at least one."""
        kept: List[Message] = []
        total_tokens = 0

        for message in reversed(messages):
            message_tokens = estimate_tokens(message.content)
            if kept and total_tokens + message_tokens > max_tokens:
                break
            kept.insert(0, message)
            total_tokens += message_tokens

        logger.info(f"Final context: {len(kept)} messages, ~{total_tokens} tokens")
        return kept
