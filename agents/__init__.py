"""Agents for the Support Assistant."""

from .intent_classifier import IntentClassifier
from .language import LanguagePipeline, is_english
from .vision import VisionExtractor
from .responder import KnowledgeResponder
from .chart_extractor import ChartDataExtractor, extract_with_patterns, wants_chart
from .image_matcher import ImageMatcher

__all__ = [
    "IntentClassifier",
    "LanguagePipeline",
    "is_english",
    "VisionExtractor",
    "KnowledgeResponder",
    "ChartDataExtractor",
    "extract_with_patterns",
    "wants_chart",
    "ImageMatcher",
]
