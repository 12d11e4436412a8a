"""
Visibility Scoring Engine
Per-result visibility scores (0-100) from mention, position and sentiment
"""

from typing import Optional, Union

from aeo_metrics.config import GENERAL_VISIBILITY_WEIGHTS, VISIBILITY_SCORE_WEIGHTS
from aeo_metrics.adapters.parsing.sentiment_analyzer import POSITIVE_THRESHOLD
from aeo_metrics.models import SentimentLabel


def _label_value(label: Union[SentimentLabel, str, None]) -> Optional[str]:
    if isinstance(label, SentimentLabel):
        return label.value
    return label


def calculate_visibility_score(
    mentioned: bool,
    position: Optional[int],
    sentiment_label: Union[SentimentLabel, str, None],
) -> int:
    """
    Visibility score used for every stored prompt result.

    Scoring Model:
    - +50 points: Brand mentioned
    - +30 points: First mention within sentence 5 (+15 within sentence 10)
    - +20 points: Positive sentiment (+10 neutral, 0 negative)

    Position only counts when the brand is mentioned. The sentiment bonus
    applies either way, so an unmentioned brand in a neutral answer scores 10.
    """
    w = VISIBILITY_SCORE_WEIGHTS
    score = 0

    if mentioned:
        score += w["mention_present"]
        if position is not None:
            if position <= 5:
                score += w["position_top_5"]
            elif position <= 10:
                score += w["position_top_10"]

    label = _label_value(sentiment_label)
    if label == SentimentLabel.POSITIVE.value:
        score += w["sentiment_positive"]
    elif label == SentimentLabel.NEUTRAL.value:
        score += w["sentiment_neutral"]
    else:
        score += w["sentiment_negative"]

    return max(0, min(100, score))


def calculate_general_visibility_score(
    mentioned: bool,
    position: Optional[int],
    sentiment_score: float,
    has_citation: bool,
    competitor_count: int,
) -> int:
    """
    General-purpose visibility score for ad hoc analysis.

    Scoring Model:
    - +40 points: Brand mentioned
    - up to +20 points: Position bonus, 20 - (position - 1) * 2, floored at 0
    - +15 points: Sentiment score above the positive threshold
    - +15 points: Brand cited as a source
    - +10 points: Fewer than 3 competitors in the answer
    - Capped at 100

    The sentiment bonus does not require a mention.
    """
    w = GENERAL_VISIBILITY_WEIGHTS
    score = 0

    if mentioned:
        score += w["mention_present"]
        if position is not None and position > 0:
            score += max(0, w["position_max_bonus"] - (position - 1) * w["position_decay"])

    if sentiment_score > POSITIVE_THRESHOLD:
        score += w["positive_sentiment"]

    if has_citation:
        score += w["citation_present"]

    if competitor_count < w["few_competitors_limit"]:
        score += w["few_competitors"]

    return min(100, score)
