"""Text extraction from screenshots attached to questions."""

import logging
from typing import Optional

from llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


class VisionExtractor:
    """Reads the question and any error message out of an attached image."""

    DEFAULT_PROMPT = (
        "Please extract and return: 1) The exact question being asked in the form, "
        "and 2) Any error message shown. Format as: Question: [question text] Error: [error message]"
    )

    def __init__(self, llm_client: BaseLLMClient):
        self.llm_client = llm_client

    def extract_text(self, image_base64: str, prompt: Optional[str] = None) -> str:
        """
        Extract text from an image.

        Args:
            image_base64: Base64-encoded image
            prompt: Optional instruction override

        Returns:
            Extracted text
        """
        text = self.llm_client.analyze_image(image_base64, prompt or self.DEFAULT_PROMPT)
        logger.info(f"Extracted {len(text)} characters of text from image")
        return text

    def merge_into_query(self, query: str, image_base64: str) -> str:
        """Append the image text to the user's message."""
        return f"{query}\n\n{self.extract_text(image_base64)}".strip()
