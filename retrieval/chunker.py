"""Knowledge base chunking."""

import re
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"#{1,3}\s")
PARAGRAPH_PATTERN = re.compile(r"\n\s*\n")


class KnowledgeChunker:
    """
    Splits a markdown knowledge document into bounded-size chunks.

    Sections are cut at `#`, `##` and `###` headings. Sections longer than
    the size limit are packed paragraph by paragraph; a single paragraph is
    never split, so one oversized paragraph becomes one oversized chunk.
    """

    DEFAULT_MAX_CHUNK_SIZE = 500
    PARAGRAPH_SEPARATOR = "\n\n"

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE):
        """
        Initialize chunker.

        Args:
            max_chunk_size: Maximum characters per chunk (default: 500)
        """
        self.max_chunk_size = max_chunk_size

    def chunk(self, text: str, max_chunk_size: Optional[int] = None) -> List[str]:
        """
        Split text into chunks.

        Args:
            text: Full knowledge document
            max_chunk_size: Optional override of the configured size

        Returns:
            Chunks in document order
        """
        limit = max_chunk_size or self.max_chunk_size
        chunks = []

        for section in HEADING_PATTERN.split(text or ""):
            section = section.strip()
            if not section:
                continue

            if len(section) <= limit:
                chunks.append(section)
            else:
                chunks.extend(self._pack_paragraphs(section, limit))

        logger.debug(f"Chunked {len(text or '')} characters into {len(chunks)} chunks (limit {limit})")
        return chunks

    def _pack_paragraphs(self, section: str, limit: int) -> List[str]:
        """Greedily pack paragraphs into chunks of at most `limit` characters."""
        packed = []
        current = ""

        for paragraph in PARAGRAPH_PATTERN.split(section):
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            candidate = f"{current}{self.PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
            if len(candidate) <= limit:
                current = candidate
            else:
                if current:
                    packed.append(current)
                current = paragraph

        if current:
            packed.append(current)

        return packed
