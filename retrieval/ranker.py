"""Lexical relevance ranking of knowledge chunks."""

import re
import logging
from typing import List, Sequence

logger = logging.getLogger(__name__)


class RelevanceRanker:
    """
    Keyword-overlap ranker for knowledge chunks.

    Score per chunk:
    - each query word of 3+ characters adds (occurrences x word length),
      where occurrences are case-insensitive matches starting at a word boundary
    - a chunk containing the whole query adds len(query) x 2

    Zero-score chunks are dropped. Ties keep the original chunk order.
    """

    MIN_WORD_LENGTH = 3
    PHRASE_BONUS_FACTOR = 2

    def find_relevant(
        self,
        query: str,
        chunks: Sequence[str],
        max_chunks: int = 3
    ) -> List[str]:
        """
        Find the most relevant chunks for a query.

        Never raises: on any internal error the first `max_chunks` chunks
        are returned in their original order.

        Args:
            query: User query
            chunks: Candidate chunks in document order
            max_chunks: Maximum number of chunks to return

        Returns:
            Chunks sorted by descending score
        """
        try:
            scored = []
            for chunk in chunks:
                score = self._score_chunk(query, chunk)
                if score > 0:
                    scored.append((score, chunk))

            # sorted() is stable, so equal scores keep document order
            ranked = sorted(scored, key=lambda item: item[0], reverse=True)
            top_chunks = [chunk for _, chunk in ranked[:max_chunks]]

            logger.info(f"Found {len(top_chunks)} relevant chunks for query: \"{query}\"")
            return top_chunks

        except Exception as e:
            logger.error(f"Error ranking knowledge chunks, using first {max_chunks}: {e}")
            return list(chunks[:max_chunks])

    def _score_chunk(self, query: str, chunk: str) -> int:
        """Score one chunk against the query."""
        chunk_lower = chunk.lower()
        query_lower = query.lower()
        score = 0

        for word in query_lower.split():
            if len(word) < self.MIN_WORD_LENGTH:
                continue
            occurrences = len(re.findall(r"\b" + re.escape(word), chunk_lower))
            score += occurrences * len(word)

        if query_lower and query_lower in chunk_lower:
            score += len(query) * self.PHRASE_BONUS_FACTOR

        return score
