"""OpenAI LLM client implementation."""

import os
import logging
from typing import Optional, List

from .base_client import BaseLLMClient, Message, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation."""

    DEFAULT_MODEL = "chatgpt-4o-latest"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY env var)
            model: Model to use (default: chatgpt-4o-latest)
            timeout: Request timeout in seconds (SDK default if None)
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self.client = None

        if self.api_key:
            try:
                from openai import OpenAI
                kwargs = {"api_key": self.api_key}
                if timeout is not None:
                    kwargs["timeout"] = timeout
                self.client = OpenAI(**kwargs)
                logger.info(f"OpenAI client initialized with model: {self.model}")
            except ImportError:
                logger.error("openai package not installed. Run: pip install openai")
        else:
            logger.warning("No OpenAI API key provided")

    def chat(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        frequency_penalty: Optional[float] = None,
        presence_penalty: Optional[float] = None
    ) -> LLMResponse:
        """Send chat completion request to OpenAI."""
        if not self.client:
            raise RuntimeError("OpenAI client not initialized. Check API key.")

        openai_messages = [
            {"role": msg.role, "content": msg.content}
            for msg in messages
        ]

        # Build request kwargs
        kwargs = {
            "model": self.model,
            "messages": openai_messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            kwargs["max_completion_tokens"] = max_tokens
        if frequency_penalty is not None:
            kwargs["frequency_penalty"] = frequency_penalty
        if presence_penalty is not None:
            kwargs["presence_penalty"] = presence_penalty

        try:
            response = self.client.chat.completions.create(**kwargs)

            choice = response.choices[0]
            content = choice.message.content or ""

            # Extract usage
            usage = None
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                }

            return LLMResponse(
                content=content,
                usage=usage,
                finish_reason=choice.finish_reason
            )

        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    def analyze_image(
        self,
        image_base64: str,
        prompt: str,
        max_tokens: int = 300
    ) -> str:
        """Send a vision request with an inline data URL."""
        if not self.client:
            raise RuntimeError("OpenAI client not initialized. Check API key.")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"}
                            }
                        ]
                    }
                ],
                max_completion_tokens=max_tokens
            )
            return response.choices[0].message.content or ""

        except Exception as e:
            logger.error(f"OpenAI vision error: {e}")
            raise

    def get_provider_name(self) -> str:
        """Get the provider name."""
        return "openai"

    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model
