"""
Result Processor
Turns one engine response into a scored, storable prompt result
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from aeo_metrics.adapters.engines.base import EngineResponse
from aeo_metrics.adapters.parsing.mention_extractor import (
    CompetitorMention,
    EntityRef,
    MentionResult,
    extract_competitor_mentions,
    extract_domain,
    extract_mentions,
)
from aeo_metrics.adapters.parsing.sentiment_analyzer import SentimentAnalyzer, SentimentResult
from aeo_metrics.models import PromptResult
from aeo_metrics.services.scoring_engine import calculate_visibility_score


@dataclass
class ProcessedResult:
    """Analysis of one engine response"""
    engine: str
    response_text: str
    mention: MentionResult
    sentiment: SentimentResult
    competitor_mentions: List[CompetitorMention]
    visibility_score: int
    citation_urls: List[str] = field(default_factory=list)
    has_citation: bool = False
    raw_response: Dict[str, Any] = field(default_factory=dict)

    def to_prompt_result(self, prompt_id: UUID, brand_id: UUID) -> PromptResult:
        """Build the row to persist; the caller adds and commits it"""
        return PromptResult(
            prompt_id=prompt_id,
            brand_id=brand_id,
            engine=self.engine,
            response_text=self.response_text,
            brand_mentioned=self.mention.mentioned,
            mention_position=self.mention.position,
            mention_count=self.mention.mention_count,
            sentiment_score=self.sentiment.score,
            sentiment_label=self.sentiment.label.value,
            citation_urls=list(self.citation_urls),
            competitor_mentions=[m.to_dict() for m in self.competitor_mentions],
            visibility_score=self.visibility_score,
            raw_response=self.raw_response,
        )


class ResultProcessor:
    """
    Scores engine responses for a brand.

    Pure apart from the injected sentiment analyzer: no storage, no I/O.
    """

    def __init__(self, analyzer: Optional[SentimentAnalyzer] = None):
        self.analyzer = analyzer or SentimentAnalyzer()

    def process(
        self,
        response: EngineResponse,
        brand: EntityRef,
        competitors: Sequence[EntityRef] = (),
    ) -> ProcessedResult:
        text = response.response_text or ""

        mention = extract_mentions(text, brand.name, brand.website_url)
        sentiment = self.analyzer.analyze(text)
        competitor_mentions = extract_competitor_mentions(text, competitors, self.analyzer)

        brand_domain = extract_domain(brand.website_url)
        has_citation = bool(brand_domain) and any(
            brand_domain in url.lower() for url in response.citation_urls
        )

        return ProcessedResult(
            engine=response.engine,
            response_text=text,
            mention=mention,
            sentiment=sentiment,
            competitor_mentions=competitor_mentions,
            visibility_score=calculate_visibility_score(
                mention.mentioned, mention.position, sentiment.label
            ),
            citation_urls=list(response.citation_urls),
            has_citation=has_citation,
            raw_response=response.raw_response,
        )
