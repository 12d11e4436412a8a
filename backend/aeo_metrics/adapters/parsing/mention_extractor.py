"""
Mention Extractor
Finds brand and competitor mentions (name or domain) in engine responses
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from aeo_metrics.adapters.parsing.sentiment_analyzer import SentimentAnalyzer
from aeo_metrics.models import SentimentLabel


# Runs of sentence delimiters
SENTENCE_BOUNDARY = re.compile(r"[.!?\n]+")


@dataclass
class MentionResult:
    """Mention statistics for one entity in one text"""
    mentioned: bool
    position: Optional[int]  # 1-indexed sentence of first occurrence
    mention_count: int


@dataclass
class EntityRef:
    """A brand or competitor to look for"""
    name: str
    website_url: str


@dataclass
class CompetitorMention:
    """A competitor found in a response, with local sentiment"""
    name: str
    position: int
    sentiment: SentimentLabel

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "position": self.position,
            "sentiment": self.sentiment.value,
        }


def extract_domain(url: str) -> str:
    """
    Bare lowercase host of a URL with any leading "www." removed.

    Falls back to the folded input when it has no recognisable host.
    """
    folded = (url or "").lower()
    try:
        host = urlparse(folded).hostname
    except ValueError:
        host = None
    if not host:
        return folded
    if host.startswith("www."):
        host = host[4:]
    return host


def split_sentences(text: str) -> List[str]:
    """Non-blank sentences of text, split on runs of . ! ? and newlines"""
    return [s for s in SENTENCE_BOUNDARY.split(text) if s.strip()]


def sentence_position(text: str, offset: int) -> int:
    """1-indexed sentence ordinal of the character at offset"""
    return len(SENTENCE_BOUNDARY.split(text[:offset]))


def clamp_sentence_index(index: int, sentence_count: int) -> int:
    """Clamp a sentence index into [0, sentence_count - 1], 0 when there are none"""
    if sentence_count <= 0:
        return 0
    return max(0, min(index, sentence_count - 1))


def _scan(haystack: str, needle: str) -> List[int]:
    """Start offsets of non-overlapping occurrences of needle"""
    if not needle:
        return []
    offsets = []
    start = haystack.find(needle)
    while start != -1:
        offsets.append(start)
        start = haystack.find(needle, start + len(needle))
    return offsets


def extract_mentions(text: str, entity_name: str, entity_url: str) -> MentionResult:
    """
    Count mentions of an entity by name and by domain.

    Name and domain hits are summed without deduplication, so "Acme" in
    "acme.com" counts twice. The position comes from the first name hit,
    or from the first domain hit when the name never occurs.
    """
    if not text or not text.strip():
        return MentionResult(mentioned=False, position=None, mention_count=0)

    folded = text.lower()
    name_hits = _scan(folded, (entity_name or "").lower())
    domain_hits = _scan(folded, extract_domain(entity_url))

    count = len(name_hits) + len(domain_hits)
    if count == 0:
        return MentionResult(mentioned=False, position=None, mention_count=0)

    first = name_hits[0] if name_hits else domain_hits[0]
    return MentionResult(
        mentioned=True,
        position=sentence_position(folded, first),
        mention_count=count,
    )


def extract_competitor_mentions(
    text: str,
    competitors: Sequence[EntityRef],
    analyzer: Optional[SentimentAnalyzer] = None,
) -> List[CompetitorMention]:
    """
    Competitors mentioned in text, in roster order, each with the sentiment
    of the sentence holding its first mention.
    """
    if not text or not competitors:
        return []

    analyzer = analyzer or SentimentAnalyzer()
    sentences = split_sentences(text)
    mentions = []

    for competitor in competitors:
        result = extract_mentions(text, competitor.name, competitor.website_url)
        if not result.mentioned:
            continue

        if sentences:
            index = clamp_sentence_index(result.position - 1, len(sentences))
            context = sentences[index]
        else:
            context = text

        mentions.append(CompetitorMention(
            name=competitor.name,
            position=result.position,
            sentiment=analyzer.analyze(context).label,
        ))

    return mentions
