"""Agent response schemas."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class MessageIntent(str, Enum):
    """Classification of an inbound message."""
    QUESTION = "QUESTION"
    ERROR = "ERROR"
    RELATED_STATEMENT = "RELATED_STATEMENT"
    IGNORE = "IGNORE"


class AnswerKind(str, Enum):
    """Outcome of a knowledge-base completion."""
    ANSWER = "ANSWER"
    NO_ANSWER = "NO_ANSWER"
    NEED_SUPPORT = "NEED_SUPPORT"


class AnswerOutcome(BaseModel):
    """
    Parsed completion result.

    The model signals escalation with the bare sentinels NO_ANSWER and
    NEED_SUPPORT. Matching is exact after trimming whitespace, so an answer
    that merely mentions a sentinel is still an answer.
    """
    kind: AnswerKind
    text: Optional[str] = None

    @classmethod
    def from_completion(cls, raw: Optional[str]) -> "AnswerOutcome":
        """Parse raw completion text into a tagged outcome. An empty reply counts as NO_ANSWER."""
        stripped = (raw or "").strip()
        if not stripped or stripped == AnswerKind.NO_ANSWER.value:
            return cls(kind=AnswerKind.NO_ANSWER)
        if stripped == AnswerKind.NEED_SUPPORT.value:
            return cls(kind=AnswerKind.NEED_SUPPORT)
        return cls(kind=AnswerKind.ANSWER, text=stripped)

    @property
    def needs_escalation(self) -> bool:
        """Whether support contacts should be notified."""
        return self.kind != AnswerKind.ANSWER
