"""Selection of knowledge-base images relevant to a question."""

import os
import re
import json
import logging
from typing import List, Optional

from llm.base_client import BaseLLMClient, Message

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif")


def normalize_image_name(filename: str) -> str:
    """Turn "Yard_Validator-PIN.png" into "yard validator pin"."""
    stem = os.path.splitext(filename)[0]
    return re.sub(r"[_\-]", " ", stem).strip().lower()


class ImageMatcher:
    """
    Picks screenshots from the knowledge images directory to send with an answer.

    The LLM sees the normalized file names and returns a JSON array of
    indexes of exact matches; at most max_images files are returned.
    """

    SYSTEM_PROMPT = "You are a precise image matcher that only returns exact matches."

    MATCH_PROMPT = """You are an image matching assistant specialized in finding exact matches between questions and image descriptions.

Given a user's question and image filenames, return ONLY the indices of images that are EXACTLY relevant to the question.
Do not return partial matches or thematically similar images.

User question: "{question}"

Available image descriptions (indices start at 0):
{names}

Return a JSON array containing ONLY the indices of perfectly matching images. Return [] if no exact matches found.

Example outputs:
- Perfect match: [2]
- Multiple matches: [1, 3]
- No matches: []"""

    def __init__(self, llm_client: BaseLLMClient, images_dir: Optional[str], max_images: int = 3):
        self.llm_client = llm_client
        self.images_dir = images_dir
        self.max_images = max_images

    def list_images(self) -> List[str]:
        """Image file names in the images directory, sorted."""
        if not self.images_dir or not os.path.isdir(self.images_dir):
            return []
        return sorted(
            name for name in os.listdir(self.images_dir)
            if name.lower().endswith(IMAGE_EXTENSIONS)
        )

    def find_relevant_images(self, question: str) -> List[str]:
        """
        Find images that exactly match a question.

        Never raises; returns an empty list on any failure.

        Returns:
            Paths of matching image files
        """
        if not question:
            return []

        try:
            images = self.list_images()
            if not images:
                return []

            names = "\n".join(f"{i}: {normalize_image_name(name)}" for i, name in enumerate(images))
            response = self.llm_client.chat(
                messages=[
                    Message(role="system", content=self.SYSTEM_PROMPT),
                    Message(role="user", content=self.MATCH_PROMPT.format(question=question, names=names))
                ],
                temperature=0.1
            )

            content = response.content.strip()
            if content.startswith("```"):
                content = content.split("```")[1]
                if content.startswith("json"):
                    content = content[4:]
                content = content.strip()

            paths = []
            for index in json.loads(content):
                if isinstance(index, int) and 0 <= index < len(images):
                    path = os.path.join(self.images_dir, images[index])
                    if path not in paths:
                        paths.append(path)

            paths = paths[:self.max_images]
            logger.info(f"Matched {len(paths)} knowledge images")
            return paths

        except Exception as e:
            logger.warning(f"Image matching failed: {e}")
            return []
