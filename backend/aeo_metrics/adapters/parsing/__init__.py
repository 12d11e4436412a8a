"""
Response and page parsing adapters
"""

from .sentiment_analyzer import SentimentAnalyzer, SentimentResult, label_for
from .mention_extractor import (
    CompetitorMention,
    EntityRef,
    MentionResult,
    clamp_sentence_index,
    extract_competitor_mentions,
    extract_domain,
    extract_mentions,
)
from .readability import ReadabilityError, flesch_reading_ease
from .content_scorer import ContentScorer, ContentScoreResult

__all__ = [
    "SentimentAnalyzer",
    "SentimentResult",
    "label_for",
    "CompetitorMention",
    "EntityRef",
    "MentionResult",
    "clamp_sentence_index",
    "extract_competitor_mentions",
    "extract_domain",
    "extract_mentions",
    "ReadabilityError",
    "flesch_reading_ease",
    "ContentScorer",
    "ContentScoreResult",
]
