"""Retrieval layer for the support knowledge base."""

from .chunker import KnowledgeChunker
from .ranker import RelevanceRanker
from .knowledge_base import KnowledgeBase

__all__ = ["KnowledgeChunker", "RelevanceRanker", "KnowledgeBase"]
