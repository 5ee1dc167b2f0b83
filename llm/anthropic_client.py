"""Anthropic Claude LLM client implementation."""

import os
import logging
from typing import Optional, List

from .base_client import BaseLLMClient, Message, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicClient(BaseLLMClient):
    """
    Anthropic Claude client implementation.

    The Messages API has no frequency/presence penalties; those arguments
    are accepted and ignored so callers can stay provider-agnostic.
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    DEFAULT_MAX_TOKENS = 1024

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key (falls back to ANTHROPIC_API_KEY env var)
            model: Model to use (default: claude-sonnet-4-20250514)
            timeout: Request timeout in seconds (SDK default if None)
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self.client = None

        if self.api_key:
            try:
                import anthropic
                kwargs = {"api_key": self.api_key}
                if timeout is not None:
                    kwargs["timeout"] = timeout
                self.client = anthropic.Anthropic(**kwargs)
                logger.info(f"Anthropic client initialized with model: {self.model}")
            except ImportError:
                logger.error("anthropic package not installed. Run: pip install anthropic")
        else:
            logger.warning("No Anthropic API key provided")

    def chat(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        frequency_penalty: Optional[float] = None,
        presence_penalty: Optional[float] = None
    ) -> LLMResponse:
        """Send chat completion request to Anthropic."""
        if not self.client:
            raise RuntimeError("Anthropic client not initialized. Check API key.")

        # Separate system messages (including context summaries) from the conversation
        system_content = ""
        conversation_messages = []

        for msg in messages:
            if msg.role == "system":
                system_content += msg.content + "\n"
            else:
                conversation_messages.append({
                    "role": msg.role,
                    "content": msg.content
                })

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens or self.DEFAULT_MAX_TOKENS,
            "messages": conversation_messages,
            "temperature": temperature,
        }

        if system_content:
            kwargs["system"] = system_content.strip()

        try:
            response = self.client.messages.create(**kwargs)

            content = ""
            for block in response.content:
                if block.type == "text":
                    content += block.text

            # Extract usage
            usage = None
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.input_tokens,
                    "completion_tokens": response.usage.output_tokens,
                    "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
                }

            return LLMResponse(
                content=content,
                usage=usage,
                finish_reason=response.stop_reason
            )

        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise

    def analyze_image(
        self,
        image_base64: str,
        prompt: str,
        max_tokens: int = 300
    ) -> str:
        """Send a vision request with a base64 image block."""
        if not self.client:
            raise RuntimeError("Anthropic client not initialized. Check API key.")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": "image/jpeg",
                                "data": image_base64
                            }
                        },
                        {"type": "text", "text": prompt}
                    ]
                }]
            )
            return "".join(
                block.text for block in response.content if block.type == "text"
            )

        except Exception as e:
            logger.error(f"Anthropic vision error: {e}")
            raise

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "anthropic"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
