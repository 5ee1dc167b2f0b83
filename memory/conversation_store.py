"""In-memory conversation history with count and age eviction."""

import logging
import threading
from typing import Dict, List, Optional

from .models import ConversationTurn, now_ms

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Per-conversation bounded message history.

    Each conversation keeps at most `retention_count` turns (oldest dropped
    first). Conversations whose newest turn is older than the retention
    window are removed by `evict_stale`, which the bot calls after every
    handled message instead of on a timer.

    All access goes through one lock so handlers running on different
    threads can share the store.
    """

    DEFAULT_RETENTION_COUNT = 20
    DEFAULT_RETENTION_MS = 24 * 60 * 60 * 1000  # 24 hours

    def __init__(
        self,
        retention_count: int = DEFAULT_RETENTION_COUNT,
        retention_ms: int = DEFAULT_RETENTION_MS
    ):
        """
        Initialize conversation store.

        Args:
            retention_count: Maximum turns kept per conversation
            retention_ms: Idle time after which a conversation is evicted
        """
        self.retention_count = retention_count
        self.retention_ms = retention_ms
        self._conversations: Dict[str, List[ConversationTurn]] = {}
        self._lock = threading.Lock()

    def append(self, conversation_id: str, turn: ConversationTurn) -> None:
        """
        Append a turn, trimming the oldest turns over the retention count.

        Args:
            conversation_id: Conversation ID
            turn: Turn to append
        """
        with self._lock:
            history = self._conversations.setdefault(conversation_id, [])
            history.append(turn)
            if len(history) > self.retention_count:
                del history[:len(history) - self.retention_count]

    def get_history(self, conversation_id: str) -> List[ConversationTurn]:
        """
        Get a snapshot of a conversation's turns, oldest first.

        Args:
            conversation_id: Conversation ID

        Returns:
            List of turns (empty if the conversation is unknown)
        """
        with self._lock:
            return list(self._conversations.get(conversation_id, []))

    def evict_stale(self, now: Optional[int] = None) -> int:
        """
        Remove empty conversations and those idle beyond the retention window.

        Args:
            now: Current time in epoch milliseconds (defaults to wall clock)

        Returns:
            Number of conversations removed
        """
        current_time = now if now is not None else now_ms()
        deleted_count = 0

        with self._lock:
            for conversation_id in list(self._conversations.keys()):
                history = self._conversations[conversation_id]
                if not history:
                    del self._conversations[conversation_id]
                    deleted_count += 1
                    continue

                last_message_time = max(turn.timestamp for turn in history)
                if current_time - last_message_time > self.retention_ms:
                    del self._conversations[conversation_id]
                    deleted_count += 1

        if deleted_count > 0:
            logger.info(f"Conversation cleanup removed {deleted_count} conversations")

        return deleted_count

    def conversation_count(self) -> int:
        """Number of conversations currently held."""
        with self._lock:
            return len(self._conversations)
