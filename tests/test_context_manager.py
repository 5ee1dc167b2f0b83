"""Tests for ContextCompactor and SummaryCache."""

from unittest.mock import Mock

from conftest import ScriptedLLMClient, SUMMARY
from llm.base_client import LLMResponse
from memory.context_manager import ContextCompactor, SummaryCache, estimate_tokens
from memory.models import ConversationTurn, ConversationSummary


def make_history(count: int, size: int = 400, start: int = 0):
    """Alternating user/assistant turns of a fixed length."""
    history = []
    for i in range(start, start + count):
        role = "user" if i % 2 == 0 else "assistant"
        content = f"{i:04d}" + "x" * (size - 4)
        history.append(ConversationTurn(role=role, content=content, timestamp=1000 + i))
    return history


class TestEstimateTokens:
    """Test token estimation."""

    def test_ceil_of_quarter_length(self):
        """Test ceil(len / 4)."""
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("x" * 400) == 100


class TestContextCompactor:
    """Test bounded context construction."""

    def setup_method(self):
        """Set up test fixtures."""
        self.llm = ScriptedLLMClient({SUMMARY: "User asked about PINs."})
        self.compactor = ContextCompactor(llm_client=self.llm, recent_window=6)

    def test_empty_history(self):
        """Test that no history gives no context."""
        assert self.compactor.get_bounded_context("c1", []) == []

    def test_short_history_passed_through(self):
        """Test role mapping without summarization."""
        history = [
            ConversationTurn(role="user", content="How do I reset my PIN?"),
            ConversationTurn(role="bot", content=""),
        ]

        messages = self.compactor.get_bounded_context("c1", history)

        assert [(m.role, m.content) for m in messages] == [
            ("user", "How do I reset my PIN?"),
            ("assistant", "content not found"),
        ]
        assert self.llm.calls == []

    def test_long_history_summarized(self):
        """Test summary message followed by the recent window."""
        history = make_history(10, size=40)

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=10000)

        assert messages[0].role == "system"
        assert messages[0].content == "Previous conversation summary: User asked about PINs."
        assert [m.content for m in messages[1:]] == [t.content for t in history[-6:]]

        call = self.llm.calls_for(SUMMARY)[0]
        assert call["temperature"] == 0.3
        assert call["max_tokens"] == 150
        assert history[0].content in call["messages"][1].content

    def test_summary_is_cached(self):
        """Test that the same old turns are summarized once."""
        history = make_history(10, size=40)

        self.compactor.get_bounded_context("c1", history, max_tokens=10000)
        self.compactor.get_bounded_context("c1", history, max_tokens=10000)

        assert len(self.llm.calls_for(SUMMARY)) == 1
        assert len(self.compactor.summary_cache) == 1

    def test_summary_refreshed_when_window_slides(self):
        """Test that a full history with new turns gets a new summary."""
        first = make_history(20, size=40)
        slid = make_history(20, size=40, start=2)

        self.compactor.get_bounded_context("c1", first, max_tokens=10000)
        self.compactor.get_bounded_context("c1", slid, max_tokens=10000)

        assert len(self.llm.calls_for(SUMMARY)) == 2

    def test_budget_keeps_trailing_messages(self):
        """Test 20 turns of ~100 tokens against a 250 token budget."""
        history = make_history(20, size=400)

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=250)

        assert 1 <= len(messages) <= 3
        assert messages[-1].content == history[-1].content
        assert [m.content for m in messages] == [t.content for t in history[-len(messages):]]

    def test_budget_always_keeps_newest_message(self):
        """Test that one oversized message is still returned."""
        history = make_history(3, size=400) + [
            ConversationTurn(role="user", content="y" * 4000, timestamp=9999)
        ]

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=250)

        assert len(messages) == 1
        assert messages[0].content == "y" * 4000

    def test_budget_applies_to_short_history(self):
        """Test that short histories are bounded too."""
        history = make_history(4, size=400)

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=250)

        assert len(messages) == 2

    def test_summary_failure_keeps_recent_turns(self):
        """Test that a failing summarizer falls back to the recent window."""
        llm = ScriptedLLMClient({SUMMARY: RuntimeError("rate limited")})
        compactor = ContextCompactor(llm_client=llm, recent_window=6)
        history = make_history(10, size=40)

        messages = compactor.get_bounded_context("c1", history, max_tokens=10000)

        assert all(m.role != "system" for m in messages)
        assert [m.content for m in messages] == [t.content for t in history[-6:]]

    def test_compaction_error_falls_back_to_recent_window(self):
        """Test that an unexpected error returns the recent window."""
        history = make_history(10, size=40)
        self.compactor._get_compacted_messages = Mock(side_effect=ValueError("bad"))

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=10000)

        assert [m.content for m in messages] == [t.content for t in history[-6:]]

    def test_compaction_error_fallback_keeps_token_budget(self):
        """Test that the fallback window is still trimmed to the budget."""
        history = make_history(10, size=400)
        self.compactor._get_compacted_messages = Mock(side_effect=ValueError("bad"))

        messages = self.compactor.get_bounded_context("c1", history, max_tokens=10)

        assert len(messages) == 1
        assert messages[0].content == history[-1].content

    def test_without_llm_client(self):
        """Test that no LLM client means no summary."""
        compactor = ContextCompactor(llm_client=None, recent_window=6)

        messages = compactor.get_bounded_context("c1", make_history(10, size=40), max_tokens=10000)

        assert len(messages) == 6


class TestSummaryCache:
    """Test cache trimming."""

    def test_trims_to_newest_entries(self):
        """Test that overflow keeps the most recently inserted entries."""
        cache = SummaryCache(max_entries=100, keep_entries=50)

        for i in range(101):
            cache.put(("c", i, i), ConversationSummary(conversation_id="c", summary=str(i), summarized_count=i))

        assert len(cache) == 50
        assert cache.get(("c", 50, 50)) is None
        assert cache.get(("c", 100, 100)).summary == "100"
        assert cache.get(("c", 51, 51)).summary == "51"

    def test_mock_llm_summary_called_with_conversation(self):
        """Test the summary prompt contains labeled turns."""
        llm = Mock()
        llm.chat.return_value = LLMResponse(content="  Summary.  ")
        compactor = ContextCompactor(llm_client=llm, recent_window=2)
        history = [
            ConversationTurn(role="user", content="Where is door 4?", timestamp=1),
            ConversationTurn(role="assistant", content="North side.", timestamp=2),
            ConversationTurn(role="user", content="Thanks", timestamp=3),
            ConversationTurn(role="assistant", content="Welcome", timestamp=4),
        ]

        summary = compactor.get_summary("c1", history[:2])

        assert summary == "Summary."
        prompt = llm.chat.call_args[1]["messages"][1].content
        assert "User: Where is door 4?" in prompt
        assert "Assistant: North side." in prompt
