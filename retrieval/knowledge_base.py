"""Static knowledge base loaded once at startup."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .chunker import KnowledgeChunker
from .ranker import RelevanceRanker

logger = logging.getLogger(__name__)


class KnowledgeBase:
    """Chunked support FAQ document with lexical retrieval."""

    def __init__(
        self,
        content: str,
        max_chunk_size: int = KnowledgeChunker.DEFAULT_MAX_CHUNK_SIZE,
        ranker: Optional[RelevanceRanker] = None
    ):
        """
        Initialize knowledge base.

        Args:
            content: Full knowledge document (markdown)
            max_chunk_size: Maximum characters per chunk
            ranker: Optional ranker override
        """
        self.content = content
        self.ranker = ranker or RelevanceRanker()
        self._chunks: Tuple[str, ...] = tuple(
            KnowledgeChunker(max_chunk_size).chunk(content)
        )
        logger.info(f"Knowledge base initialized with {len(self._chunks)} chunks")

    @classmethod
    def from_file(cls, path: str, max_chunk_size: int = KnowledgeChunker.DEFAULT_MAX_CHUNK_SIZE) -> "KnowledgeBase":
        """
        Load a knowledge base from a markdown file.

        Args:
            path: Path to the knowledge document
            max_chunk_size: Maximum characters per chunk

        Returns:
            KnowledgeBase instance
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Knowledge base not found: {path}")

        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        logger.info(f"Loaded knowledge base from {path} ({len(content)} characters)")
        return cls(content, max_chunk_size=max_chunk_size)

    @property
    def chunks(self) -> Tuple[str, ...]:
        """Chunks in document order."""
        return self._chunks

    def find_relevant(self, query: str, max_chunks: int = 3) -> List[str]:
        """Return the top chunks for a query."""
        return self.ranker.find_relevant(query, self._chunks, max_chunks)
