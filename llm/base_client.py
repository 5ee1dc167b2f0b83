"""Base LLM client interface."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict
from pydantic import BaseModel


class Message(BaseModel):
    """Chat message."""
    role: str  # "system", "user", "assistant"
    content: str


class LLMResponse(BaseModel):
    """Response from LLM."""
    content: str
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        frequency_penalty: Optional[float] = None,
        presence_penalty: Optional[float] = None
    ) -> LLMResponse:
        """
        Send chat completion request.

        Args:
            messages: List of messages in conversation
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens in response (provider default if None)
            frequency_penalty: Optional repetition penalty
            presence_penalty: Optional new-topic penalty

        Returns:
            LLMResponse with content
        """
        pass

    @abstractmethod
    def analyze_image(
        self,
        image_base64: str,
        prompt: str,
        max_tokens: int = 300
    ) -> str:
        """
        Ask the model about an image.

        Args:
            image_base64: Base64-encoded image (JPEG or PNG)
            prompt: Instruction for the model
            max_tokens: Maximum tokens in response

        Returns:
            Model text output
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Get the name of the LLM provider."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the name of the model being used."""
        pass
