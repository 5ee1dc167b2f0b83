"""Main orchestrator for the support bot."""

import os
import re
import base64
import logging
import mimetypes
from typing import Optional, Dict, Any, List

from config.settings import Settings

# Knowledge retrieval
from retrieval.knowledge_base import KnowledgeBase

# LLM components
from llm.factory import create_llm_client, LLMProvider
from llm.base_client import BaseLLMClient

# Memory components
from memory.models import ConversationTurn
from memory.conversation_store import ConversationStore
from memory.context_manager import ContextCompactor, SummaryCache

# Agents
from agents.intent_classifier import IntentClassifier
from agents.language import LanguagePipeline
from agents.vision import VisionExtractor
from agents.responder import KnowledgeResponder
from agents.chart_extractor import ChartDataExtractor, wants_chart
from agents.image_matcher import ImageMatcher

# Charts and transport
from charts import ChartRenderer, create_chart_renderer
from transport.base import MessageTransport
from transport.image_downloader import ImageDownloader

from schemas.messages import InboundMessage, OutboundMessage, Mention, Attachment
from schemas.responses import MessageIntent, AnswerKind

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"<at>(.*?)</at>", re.IGNORECASE)


class SupportBotOrchestrator:
    """
    Handles inbound chat messages end to end.

    Gate (REPLY_TO or mention) -> image text -> intent -> language ->
    bounded context -> knowledge retrieval -> completion -> answer or
    escalation -> delivery -> history append -> stale conversation sweep.
    """

    NO_ANSWER_MESSAGE = "I don't have information about that in my knowledge base. Let me notify our support team."
    NEED_SUPPORT_MESSAGE = "Let me notify our support team so they can help you with this."
    ERROR_MESSAGE = "Sorry, I encountered an error processing your request. Let me notify our support team."
    ESCALATION_REQUEST = "Could you please help with this query?"
    CHART_APOLOGY = "(Sorry, I wasn't able to generate a chart for this answer.)"
    WELCOME_MESSAGE = (
        "Hello and welcome! I am your {bot_name}. Please mention me with your query and I will "
        "do my best to help you. If I am unable to assist, I will notify our support team."
    )

    def __init__(
        self,
        transport: MessageTransport,
        settings: Optional[Settings] = None,
        llm_client: Optional[BaseLLMClient] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        chart_renderer: Optional[ChartRenderer] = None,
        conversation_store: Optional[ConversationStore] = None,
        image_downloader: Optional[ImageDownloader] = None
    ):
        """
        Initialize orchestrator.

        Collaborators not passed in are built from settings.

        Args:
            transport: Chat platform adapter
            settings: Application settings
            llm_client: LLM client override
            knowledge_base: Knowledge base override
            chart_renderer: Chart renderer override
            conversation_store: Conversation store override
            image_downloader: Attachment downloader override
        """
        self.settings = settings or Settings()
        self.transport = transport

        # Initialize LLM client
        self.llm_client: Optional[BaseLLMClient] = llm_client
        if self.llm_client is None:
            self._init_llm_client()

        # Initialize knowledge base
        self.knowledge_base = knowledge_base
        if self.knowledge_base is None:
            self._init_knowledge_base()

        # Initialize memory
        self._init_memory(conversation_store)

        # Initialize agents
        self._init_agents()

        # Initialize charts and attachments
        self.chart_renderer = chart_renderer
        if self.chart_renderer is None:
            self.chart_renderer = create_chart_renderer(self.settings)
        self.image_downloader = image_downloader or ImageDownloader()

    def _init_llm_client(self):
        """Initialize LLM client based on settings."""
        api_key = self.settings.get_llm_api_key()

        if not api_key:
            raise ValueError(
                f"No API key for {self.settings.llm_provider}. "
                "Set OPENAI_API_KEY or ANTHROPIC_API_KEY."
            )

        provider = LLMProvider(self.settings.llm_provider)
        self.llm_client = create_llm_client(
            provider=provider,
            api_key=api_key,
            model=self.settings.llm_model,
            timeout=self.settings.llm_timeout_seconds
        )
        logger.info(
            f"LLM client initialized: {self.settings.llm_provider} "
            f"({self.llm_client.get_model_name()})"
        )

    def _init_knowledge_base(self):
        """Load and chunk the knowledge document."""
        self.knowledge_base = KnowledgeBase.from_file(
            self.settings.knowledge_base_path,
            max_chunk_size=self.settings.max_chunk_size
        )

    def _init_memory(self, conversation_store: Optional[ConversationStore]):
        """Initialize conversation store and context compactor."""
        self.conversation_store = conversation_store or ConversationStore(
            retention_count=self.settings.message_retention_count,
            retention_ms=int(self.settings.conversation_retention_hours * 60 * 60 * 1000)
        )
        self.summary_cache = SummaryCache()
        self.context_compactor = ContextCompactor(
            llm_client=self.llm_client,
            recent_window=self.settings.recent_message_window,
            summary_cache=self.summary_cache
        )

    def _init_agents(self):
        """Initialize LLM-backed agents."""
        self.intent_classifier = IntentClassifier(
            self.llm_client,
            temperature=self.settings.message_intent_temperature
        )
        self.language = LanguagePipeline(
            self.llm_client,
            detection_temperature=self.settings.language_detection_temperature,
            translation_temperature=self.settings.translation_temperature
        )
        self.vision = VisionExtractor(self.llm_client)
        self.responder = KnowledgeResponder(
            self.llm_client,
            temperature=self.settings.response_temperature,
            frequency_penalty=self.settings.completion_frequency_penalty,
            presence_penalty=self.settings.completion_presence_penalty
        )
        self.chart_extractor = ChartDataExtractor(self.llm_client)
        self.image_matcher: Optional[ImageMatcher] = None
        if self.settings.knowledge_images_dir:
            self.image_matcher = ImageMatcher(self.llm_client, self.settings.knowledge_images_dir)

    def handle_message(self, message: InboundMessage) -> Optional[OutboundMessage]:
        """
        Process an inbound message end to end.

        Args:
            message: Inbound chat message

        Returns:
            The delivered message, or None if the bot stayed silent
        """
        logger.info(f"Message received from {message.user_name} in {message.conversation_id}")

        try:
            if not message.mentions_bot and not self.settings.is_reply_to(message.user_name):
                logger.debug(f"Ignoring message from {message.user_name}: not mentioned and not in REPLY_TO")
                return None

            text = self._strip_bot_mention(message.text)
            query = text

            try:
                query = self._assemble_input(message, text)

                intent = self.intent_classifier.classify(query)
                if intent == MessageIntent.IGNORE and not message.mentions_bot:
                    logger.info(f"Message from {message.user_name} classified IGNORE, no reply")
                    return None

                self.transport.send_typing(message.conversation_id)

                language = self.language.detect_language(query)
                outbound, reply_text = self._generate_response(message, query, language)

            except Exception as e:
                logger.error(
                    f"Error processing message in {message.conversation_id} "
                    f"from {message.user_name}: {e}",
                    exc_info=True
                )
                outbound = self._build_escalation(message.conversation_id, self.ERROR_MESSAGE)
                reply_text = self.ERROR_MESSAGE

            self.transport.send(outbound)
            self._append_turns(message, query, reply_text)
            return outbound

        finally:
            self.conversation_store.evict_stale()

    def handle_members_added(self, conversation_id: str) -> OutboundMessage:
        """Send the welcome message when the bot joins a conversation."""
        outbound = OutboundMessage(
            conversation_id=conversation_id,
            text=self.WELCOME_MESSAGE.format(bot_name=self.settings.bot_name)
        )
        self.transport.send(outbound)
        return outbound

    def get_metrics(self) -> Dict[str, Any]:
        """Get runtime metrics for monitoring."""
        return {
            "knowledge_chunks": len(self.knowledge_base.chunks),
            "cached_summaries": len(self.summary_cache),
            "active_conversations": self.conversation_store.conversation_count(),
            "llm_provider": self.llm_client.get_provider_name(),
            "llm_model": self.llm_client.get_model_name(),
        }

    def _strip_bot_mention(self, text: str) -> str:
        """Remove the bot's own <at> mention and unwrap any other mentions."""
        bot_name = self.settings.bot_name.lower()

        def replace(match):
            name = match.group(1)
            return "" if name.strip().lower() == bot_name else name

        return MENTION_PATTERN.sub(replace, text or "").strip()

    def _assemble_input(self, message: InboundMessage, text: str) -> str:
        """Merge text read from an attached image into the query."""
        image = message.first_image()
        if image is None:
            return text

        if image.content:
            image_base64 = base64.b64encode(image.content).decode("ascii")
        elif image.content_url:
            image_base64 = self.image_downloader.download_base64(image.content_url)
        elif image.path:
            with open(image.path, "rb") as f:
                image_base64 = base64.b64encode(f.read()).decode("ascii")
        else:
            return text

        return self.vision.merge_into_query(text, image_base64)

    def _generate_response(self, message: InboundMessage, query: str, language: str):
        """
        Build context, retrieve knowledge, call the completion and shape the reply.

        Returns:
            Tuple of (outbound message, reply text for history)
        """
        conversation_id = message.conversation_id

        history = self.conversation_store.get_history(conversation_id)
        context_messages = self.context_compactor.get_bounded_context(
            conversation_id,
            history,
            max_tokens=self.settings.context_max_tokens
        )
        logger.info(f"Context for {conversation_id}: {len(context_messages)} messages from {len(history)} turns")

        knowledge_chunks = self.knowledge_base.find_relevant(query, self.settings.max_knowledge_chunks)

        outcome = self.responder.respond(query, language, context_messages, knowledge_chunks)

        if outcome.kind == AnswerKind.NO_ANSWER:
            reply_text = self.language.localize(self.NO_ANSWER_MESSAGE, language)
            return self._build_escalation(conversation_id, reply_text), reply_text

        if outcome.kind == AnswerKind.NEED_SUPPORT:
            return self._build_escalation(conversation_id, self.NEED_SUPPORT_MESSAGE), self.NEED_SUPPORT_MESSAGE

        return self._build_answer(message, query, outcome.text), outcome.text

    def _build_answer(self, message: InboundMessage, query: str, answer: str) -> OutboundMessage:
        """Address the answer to the sender and attach chart and images."""
        mention = Mention(id=message.user_id, name=message.user_name)
        outbound = OutboundMessage(
            conversation_id=message.conversation_id,
            text=f"{mention.text} {answer}",
            mentions=[mention]
        )

        if self.chart_renderer is not None and wants_chart(query):
            self._attach_chart(outbound, answer, query)

        if self.image_matcher is not None:
            outbound.attachments.extend(self._knowledge_images(query))

        return outbound

    def _attach_chart(self, outbound: OutboundMessage, answer: str, query: str):
        """Render the answer's data as a chart; apologize inline if rendering fails."""
        dataset = self.chart_extractor.extract(answer, query)
        if dataset is None:
            logger.info("No chartable data in answer, sending text only")
            return

        try:
            result = self.chart_renderer.render(dataset, dataset.chart_type, dataset.title)
            outbound.attachments.append(Attachment.from_chart(result))
            logger.info(f"Attached {dataset.chart_type.value} chart with {len(dataset.labels)} points")
        except Exception as e:
            logger.warning(f"Chart rendering failed: {e}")
            outbound.text = f"{outbound.text}\n\n{self.CHART_APOLOGY}"

    def _knowledge_images(self, query: str) -> List[Attachment]:
        """Attachments for knowledge images matching the question."""
        attachments = []
        for path in self.image_matcher.find_relevant_images(query):
            content_type = mimetypes.guess_type(path)[0] or "image/png"
            attachments.append(Attachment(
                content_type=content_type,
                name=os.path.basename(path),
                path=path
            ))
        return attachments

    def _build_escalation(self, conversation_id: str, text: str) -> OutboundMessage:
        """Append support contact mentions to a fallback message."""
        mentions = [
            Mention(id=contact.email, name=contact.name)
            for contact in self.settings.get_support_users()
        ]

        body = text
        if mentions:
            body = f"{text}\n\n{', '.join(m.text for m in mentions)} - {self.ESCALATION_REQUEST}"
        else:
            logger.warning("No SUPPORT_USERS configured, escalation has no recipients")

        return OutboundMessage(
            conversation_id=conversation_id,
            text=body,
            mentions=mentions,
            is_escalation=True
        )

    def _append_turns(self, message: InboundMessage, query: str, reply_text: str):
        """Record the user turn and the bot reply after delivery."""
        self.conversation_store.append(
            message.conversation_id,
            ConversationTurn(role="user", name=message.user_name, content=query)
        )
        self.conversation_store.append(
            message.conversation_id,
            ConversationTurn(role="assistant", content=reply_text)
        )


# Alias for backwards compatibility
Orchestrator = SupportBotOrchestrator
