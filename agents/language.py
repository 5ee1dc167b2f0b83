"""Language detection and translation of fixed bot replies."""

import re
import logging

from llm.base_client import BaseLLMClient, Message

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


class LanguagePipeline:
    """Detects the user's language and translates canned replies into it."""

    DETECTION_PROMPT = (
        "Detect the language of the following text and respond with the language code only "
        "(e.g., 'en' for English, 'es' for Spanish, etc.)"
    )

    def __init__(
        self,
        llm_client: BaseLLMClient,
        detection_temperature: float = 0.3,
        translation_temperature: float = 0.3
    ):
        """
        Initialize language pipeline.

        Args:
            llm_client: LLM client for detection and translation
            detection_temperature: Temperature for language detection
            translation_temperature: Temperature for translation
        """
        self.llm_client = llm_client
        self.detection_temperature = detection_temperature
        self.translation_temperature = translation_temperature

    def detect_language(self, text: str) -> str:
        """
        Detect the language of a text.

        Returns:
            Lowercase language code; "en" if detection fails
        """
        try:
            response = self.llm_client.chat(
                messages=[
                    Message(role="system", content=self.DETECTION_PROMPT),
                    Message(role="user", content=text)
                ],
                temperature=self.detection_temperature,
                max_tokens=10
            )
        except Exception as e:
            logger.warning(f"Language detection failed, assuming English: {e}")
            return DEFAULT_LANGUAGE

        code = self._normalize_code(response.content)
        logger.info(f"Detected language: {code}")
        return code

    def translate(self, text: str, target_language: str) -> str:
        """Translate text into the target language."""
        response = self.llm_client.chat(
            messages=[
                Message(role="system", content=f"Translate the following text to {target_language}"),
                Message(role="user", content=text)
            ],
            temperature=self.translation_temperature
        )
        return response.content.strip()

    def localize(self, text: str, language: str) -> str:
        """
        Translate an English reply when the user writes another language.

        Returns the English text unchanged if translation fails.
        """
        if is_english(language):
            return text

        try:
            return self.translate(text, language) or text
        except Exception as e:
            logger.warning(f"Translation to {language} failed, sending English: {e}")
            return text

    @staticmethod
    def _normalize_code(content: str) -> str:
        """Reduce model output like " 'ES'. " to "es"."""
        tokens = (content or "").split()
        code = tokens[0].strip(".,\"'`").lower() if tokens else ""
        if re.fullmatch(r"[a-z]{2,3}(-[a-z]{2,4})?", code):
            return code
        return DEFAULT_LANGUAGE


def is_english(language: str) -> bool:
    """Whether a language code denotes English (en, en-us, ...)."""
    return (language or DEFAULT_LANGUAGE).lower().split("-")[0] == DEFAULT_LANGUAGE
