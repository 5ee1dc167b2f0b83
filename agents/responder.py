"""Knowledge-grounded answer generation."""

import logging
from datetime import date
from typing import List, Optional

from llm.base_client import BaseLLMClient, Message
from memory.context_manager import estimate_tokens
from schemas.responses import AnswerOutcome

logger = logging.getLogger(__name__)


class KnowledgeResponder:
    """
    Answers a question from retrieved knowledge chunks.

    Builds the system prompt (guidelines plus knowledge), appends the
    compacted conversation context and the current question, calls the
    completion API and parses the reply into an AnswerOutcome.
    """

    SYSTEM_PROMPT_TEMPLATE = """You are a support assistant for our product. Respond in {language} when appropriate.

Response Guidelines:
1. Adapt response style based on query complexity
2. Use 1-3 sentences for simple answers, 1-2 paragraphs for complex ones
3. Professional tone for technical queries, conversational for general questions
4. Always paraphrase knowledge base content in your own words
5. Current date: {today}

IMPORTANT:
- If no relevant information exists, respond with exactly: NO_ANSWER
- If the user asks for the support team or still needs help after your guidance, respond with exactly: NEED_SUPPORT
- When you respond with NO_ANSWER or NEED_SUPPORT, output nothing else.

Relevant Knowledge Base:
{knowledge}

Note: Respond naturally based on conversation flow."""

    # Rough size of sending the whole knowledge base, for the savings log line
    FULL_KNOWLEDGE_BASELINE_TOKENS = 5000

    def __init__(
        self,
        llm_client: BaseLLMClient,
        temperature: float = 0.7,
        frequency_penalty: Optional[float] = 0.8,
        presence_penalty: Optional[float] = 0.3
    ):
        """
        Initialize responder.

        Args:
            llm_client: LLM client for completions
            temperature: Response temperature
            frequency_penalty: Repetition penalty
            presence_penalty: New-topic penalty
        """
        self.llm_client = llm_client
        self.temperature = temperature
        self.frequency_penalty = frequency_penalty
        self.presence_penalty = presence_penalty

    def build_system_prompt(self, language: str, knowledge_chunks: List[str]) -> str:
        """Build the system prompt with guidelines and retrieved knowledge."""
        return self.SYSTEM_PROMPT_TEMPLATE.format(
            language=language,
            today=date.today().isoformat(),
            knowledge="\n\n".join(knowledge_chunks)
        )

    def build_messages(
        self,
        query: str,
        language: str,
        context_messages: List[Message],
        knowledge_chunks: List[str]
    ) -> List[Message]:
        """Assemble system prompt, context and the current question."""
        messages = [Message(role="system", content=self.build_system_prompt(language, knowledge_chunks))]
        messages.extend(context_messages)
        messages.append(Message(role="user", content=query))
        return messages

    def respond(
        self,
        query: str,
        language: str,
        context_messages: List[Message],
        knowledge_chunks: List[str]
    ) -> AnswerOutcome:
        """
        Generate an answer.

        Completion errors propagate to the caller, which escalates.

        Args:
            query: Current user question
            language: Detected language code
            context_messages: Compacted conversation context
            knowledge_chunks: Retrieved knowledge chunks

        Returns:
            AnswerOutcome (answer text, NO_ANSWER or NEED_SUPPORT)
        """
        messages = self.build_messages(query, language, context_messages, knowledge_chunks)
        self._log_token_usage(knowledge_chunks, context_messages, query)

        response = self.llm_client.chat(
            messages=messages,
            temperature=self.temperature,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty
        )

        outcome = AnswerOutcome.from_completion(response.content)
        logger.info(f"Completion outcome: {outcome.kind.value}")
        return outcome

    def _log_token_usage(
        self,
        knowledge_chunks: List[str],
        context_messages: List[Message],
        query: str
    ):
        """Log estimated prompt size."""
        knowledge_tokens = estimate_tokens("\n\n".join(knowledge_chunks))
        context_tokens = sum(estimate_tokens(msg.content) for msg in context_messages)
        query_tokens = estimate_tokens(query)
        total_tokens = knowledge_tokens + context_tokens + query_tokens

        logger.info(
            f"Token usage: knowledge ~{knowledge_tokens}, "
            f"context ~{context_tokens} ({len(context_messages)} messages), "
            f"query ~{query_tokens}, total ~{total_tokens}, "
            f"saved ~{max(0, self.FULL_KNOWLEDGE_BASELINE_TOKENS - total_tokens)} vs full knowledge base"
        )
