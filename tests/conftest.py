"""Shared test doubles."""

from typing import Dict, List, Optional, Union

import pytest

from llm.base_client import BaseLLMClient, Message, LLMResponse

# System prompt fragments of each LLM call made by the bot
INTENT = "Analyze if the given message"
LANGUAGE = "Detect the language"
TRANSLATE = "Translate the following text"
SUMMARY = "conversation summarizer"
ANSWER = "support assistant for our product"
CHART = "data extraction specialist"
IMAGES = "precise image matcher"

Reply = Union[str, Exception]


class ScriptedLLMClient(BaseLLMClient):
    """
    LLM stand-in that answers by matching the system prompt.

    `script` maps a system prompt fragment to a reply string, an exception
    to raise, or a list of those consumed one per call.
    """

    def __init__(
        self,
        script: Optional[Dict[str, Union[Reply, List[Reply]]]] = None,
        default: Reply = "",
        image_text: Reply = ""
    ):
        self.script = dict(script or {})
        self.default = default
        self.image_text = image_text
        self.calls: List[dict] = []
        self.image_calls: List[dict] = []

    def chat(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        frequency_penalty: Optional[float] = None,
        presence_penalty: Optional[float] = None
    ) -> LLMResponse:
        system = messages[0].content if messages and messages[0].role == "system" else ""
        key = next((fragment for fragment in self.script if fragment in system), None)
        self.calls.append({
            "key": key,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "frequency_penalty": frequency_penalty,
            "presence_penalty": presence_penalty,
        })

        reply = self.script[key] if key is not None else self.default
        if isinstance(reply, list):
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply)

    def analyze_image(self, image_base64: str, prompt: str, max_tokens: int = 300) -> str:
        self.image_calls.append({"image_base64": image_base64, "prompt": prompt})
        if isinstance(self.image_text, Exception):
            raise self.image_text
        return self.image_text

    def get_provider_name(self) -> str:
        return "scripted"

    def get_model_name(self) -> str:
        return "scripted-model"

    def calls_for(self, key: str) -> List[dict]:
        """Recorded chat calls whose system prompt matched `key`."""
        return [call for call in self.calls if call["key"] == key]


@pytest.fixture
def scripted_llm():
    """Factory for ScriptedLLMClient."""
    return ScriptedLLMClient
