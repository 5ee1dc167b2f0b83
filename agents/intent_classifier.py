"""LLM-based intent classifier that gates which messages get a reply."""

import logging

from llm.base_client import BaseLLMClient, Message
from schemas.responses import MessageIntent

logger = logging.getLogger(__name__)


class IntentClassifier:
    """
    Classifies inbound channel messages.

    The bot reads every message in a channel; IGNORE marks small talk
    between people that should get no reply unless the bot was mentioned.
    """

    SYSTEM_PROMPT = """Analyze if the given message is a question or error or RELATED_STATEMENT or can be ignored.
Respond with exactly one word: QUESTION, ERROR, RELATED_STATEMENT or IGNORE.

Examples:
- "How do I..." -> QUESTION
- "I'm getting error..." -> ERROR
- "Any info regarding warehouse check-in, check-out, yard, validator, PIN, password etc." -> RELATED_STATEMENT
- "Good morning", or any general conversation between people that is not asked of or given to the bot -> IGNORE"""

    def __init__(self, llm_client: BaseLLMClient, temperature: float = 0.5):
        """
        Initialize intent classifier.

        Args:
            llm_client: LLM client for classification
            temperature: Sampling temperature
        """
        self.llm_client = llm_client
        self.temperature = temperature

    def classify(self, message: str) -> MessageIntent:
        """
        Classify a message.

        Falls back to QUESTION when the model fails or answers with an
        unknown label, so a message is never dropped because of an error.

        Args:
            message: Message text (with any image text merged in)

        Returns:
            MessageIntent
        """
        messages = [
            Message(role="system", content=self.SYSTEM_PROMPT),
            Message(role="user", content=message)
        ]

        try:
            response = self.llm_client.chat(
                messages=messages,
                temperature=self.temperature,
                max_tokens=10
            )
        except Exception as e:
            logger.warning(f"Intent classification failed, treating as QUESTION: {e}")
            return MessageIntent.QUESTION

        intent = self._parse_intent(response.content)
        logger.info(f"Intent: {intent.value}")
        return intent

    def _parse_intent(self, content: str) -> MessageIntent:
        """Map model output to an intent label."""
        label = (content or "").strip().strip(".\"'`").upper().replace(" ", "_")
        try:
            return MessageIntent(label)
        except ValueError:
            logger.warning(f"Unknown intent label '{content}', treating as QUESTION")
            return MessageIntent.QUESTION
