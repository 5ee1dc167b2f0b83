"""LLM client layer (OpenAI and Anthropic chat and vision)."""

from .base_client import BaseLLMClient, Message, LLMResponse
from .factory import create_llm_client, LLMProvider
from .openai_client import OpenAIClient
from .anthropic_client import AnthropicClient

__all__ = [
    "BaseLLMClient",
    "Message",
    "LLMResponse",
    "OpenAIClient",
    "AnthropicClient",
    "create_llm_client",
    "LLMProvider",
]
