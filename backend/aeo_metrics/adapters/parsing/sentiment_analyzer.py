"""
Sentiment Analyzer
Lexicon and rule based polarity scoring (VADER family) for engine responses
"""

import math
import string
from dataclasses import dataclass, field
from typing import List

from aeo_metrics.models import SentimentLabel


# Label thresholds on the compound score
POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05

# Rule constants
BOOSTER_INCR = 0.293
BOOSTER_DECR = -0.293
CAPS_INCR = 0.733
NEGATION_SCALAR = -0.74
NORMALIZATION_ALPHA = 15
EXCLAMATION_INCR = 0.292
EXCLAMATION_MAX = 4
QUESTION_INCR = 0.18
QUESTION_MAX_AMPLIFIER = 0.96


@dataclass
class SentimentResult:
    """Result of sentiment analysis"""
    score: float  # -1.0 to 1.0
    label: SentimentLabel
    matched_indicators: List[str] = field(default_factory=list)  # Words that contributed


def label_for(score: float) -> SentimentLabel:
    """Map a compound score onto a label using the fixed thresholds"""
    if score > POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


class SentimentAnalyzer:
    """
    Rule-based compound sentiment scorer.

    Each lexicon word carries a valence on a -4..4 scale. Valences are
    adjusted by degree modifiers and negations in the three preceding
    tokens, by ALL-CAPS emphasis, and by a contrastive "but". The summed
    valence is amplified by ! and ? and normalised into [-1, 1].

    Instances hold no mutable state and can be shared between threads.
    """

    LEXICON = {
        # Strong positive
        "excellent": 3.2, "outstanding": 3.3, "exceptional": 3.1, "best": 3.2,
        "superb": 3.1, "amazing": 2.8, "fantastic": 2.6, "wonderful": 2.7,
        "brilliant": 2.8, "perfect": 2.7, "love": 3.2, "loved": 2.9,
        "awesome": 3.1, "incredible": 2.7, "remarkable": 2.4, "superior": 2.5,
        # Moderate positive
        "great": 3.1, "good": 1.9, "impressive": 2.3, "innovative": 1.9,
        "powerful": 1.8, "leading": 1.5, "trusted": 2.1, "trust": 2.3,
        "reliable": 1.8, "effective": 2.1, "efficient": 1.8, "useful": 1.9,
        "helpful": 1.8, "recommended": 1.5, "recommend": 1.5, "popular": 1.8,
        "solid": 1.3, "strong": 2.3, "quality": 1.2, "robust": 1.7,
        "comprehensive": 1.5, "intuitive": 1.6, "easy": 1.9, "fast": 1.2,
        "secure": 1.4, "affordable": 1.5, "valuable": 2.1, "favorite": 2.0,
        "happy": 2.7, "pleased": 1.9, "satisfied": 1.8, "enjoy": 2.2,
        "benefit": 1.5, "benefits": 1.6, "advantage": 1.5, "success": 2.7,
        "successful": 2.8, "improved": 2.1, "improve": 1.9, "win": 2.8,
        "winner": 2.8, "like": 1.5, "well": 1.1, "top": 0.8,
        # Mild positive
        "nice": 1.8, "decent": 0.9, "fine": 0.8, "adequate": 0.9,
        "capable": 1.6, "suitable": 1.2, "clean": 1.7, "simple": 1.0,
        "flexible": 1.3, "stable": 1.2, "safe": 1.9, "fair": 1.3,
        # Strong negative
        "terrible": -2.1, "awful": -2.0, "worst": -3.1, "horrible": -2.5,
        "hate": -2.7, "hated": -3.2, "disaster": -3.1, "useless": -1.8,
        "scam": -2.7, "fraud": -2.8, "dangerous": -2.1, "pathetic": -2.7,
        # Moderate negative
        "bad": -2.5, "poor": -2.1, "broken": -2.1, "failing": -2.3,
        "fail": -2.5, "failed": -2.3, "failure": -2.3, "disappointing": -2.2,
        "disappointed": -1.9, "frustrating": -2.1, "frustrated": -2.4,
        "unreliable": -1.9, "outdated": -1.2, "weak": -1.9, "buggy": -1.7,
        "expensive": -0.9, "overpriced": -1.6, "slow": -1.2, "problem": -1.7,
        "problems": -1.7, "problematic": -1.9, "issue": -0.8, "issues": -0.9,
        "difficult": -1.5, "complicated": -1.0, "confusing": -1.3,
        "lacking": -1.1, "lacks": -1.1, "insecure": -1.8, "risk": -1.1,
        "risky": -1.4, "wrong": -2.1, "worse": -2.1, "avoid": -1.2,
        "complaint": -1.5, "complaints": -1.7, "negative": -2.7,
        # Mild negative
        "limited": -0.9, "mediocre": -1.0, "inconsistent": -1.1,
        "average": -0.2, "basic": -0.3, "challenging": -0.6, "concern": -1.0,
        "concerns": -1.0, "unclear": -1.0, "clunky": -1.1, "costly": -0.9,
    }

    # Degree modifiers
    BOOSTERS = {
        "absolutely": BOOSTER_INCR, "completely": BOOSTER_INCR,
        "considerably": BOOSTER_INCR, "decidedly": BOOSTER_INCR,
        "deeply": BOOSTER_INCR, "enormously": BOOSTER_INCR,
        "entirely": BOOSTER_INCR, "especially": BOOSTER_INCR,
        "exceptionally": BOOSTER_INCR, "extremely": BOOSTER_INCR,
        "greatly": BOOSTER_INCR, "highly": BOOSTER_INCR,
        "hugely": BOOSTER_INCR, "incredibly": BOOSTER_INCR,
        "intensely": BOOSTER_INCR, "majorly": BOOSTER_INCR,
        "more": BOOSTER_INCR, "most": BOOSTER_INCR,
        "particularly": BOOSTER_INCR, "purely": BOOSTER_INCR,
        "quite": BOOSTER_INCR, "really": BOOSTER_INCR,
        "remarkably": BOOSTER_INCR, "so": BOOSTER_INCR,
        "substantially": BOOSTER_INCR, "thoroughly": BOOSTER_INCR,
        "totally": BOOSTER_INCR, "tremendously": BOOSTER_INCR,
        "truly": BOOSTER_INCR, "unusually": BOOSTER_INCR,
        "very": BOOSTER_INCR,
        "almost": BOOSTER_DECR, "barely": BOOSTER_DECR,
        "hardly": BOOSTER_DECR, "less": BOOSTER_DECR,
        "little": BOOSTER_DECR, "marginally": BOOSTER_DECR,
        "occasionally": BOOSTER_DECR, "partly": BOOSTER_DECR,
        "scarcely": BOOSTER_DECR, "slightly": BOOSTER_DECR,
        "somewhat": BOOSTER_DECR, "sort": BOOSTER_DECR,
    }

    NEGATION_WORDS = {
        "not", "no", "never", "neither", "nor", "none", "nobody", "nothing",
        "nowhere", "cannot", "without", "rarely", "seldom", "despite",
        "isn't", "aren't", "wasn't", "weren't", "doesn't", "don't", "didn't",
        "won't", "wouldn't", "can't", "couldn't", "shouldn't", "hasn't",
        "haven't", "hadn't", "ain't", "isnt", "arent", "doesnt", "dont",
        "didnt", "wont", "cant", "couldnt", "shouldnt",
    }

    _strip_chars = string.punctuation.replace("'", "")

    def analyze(self, text: str) -> SentimentResult:
        """
        Analyze sentiment of text.

        Args:
            text: Text to analyze

        Returns:
            SentimentResult with compound score and label
        """
        if not text or not text.strip():
            return SentimentResult(score=0.0, label=SentimentLabel.NEUTRAL)

        tokens = self._tokenize(text)
        is_cap_diff = self._has_mixed_case(tokens)

        sentiments: List[float] = []
        matched_indicators: List[str] = []
        for i, token in enumerate(tokens):
            valence = self._token_valence(tokens, i, is_cap_diff)
            if valence != 0:
                matched_indicators.append(token.lower())
            sentiments.append(valence)

        sentiments = self._apply_but_rule(tokens, sentiments)

        total = sum(sentiments)
        if total == 0:
            return SentimentResult(score=0.0, label=SentimentLabel.NEUTRAL,
                                   matched_indicators=matched_indicators)

        emphasis = self._punctuation_emphasis(text)
        if total > 0:
            total += emphasis
        else:
            total -= emphasis

        score = self._normalize(total)
        return SentimentResult(
            score=score,
            label=label_for(score),
            matched_indicators=matched_indicators,
        )

    def _tokenize(self, text: str) -> List[str]:
        """Whitespace split with edge punctuation stripped, apostrophes kept"""
        tokens = []
        for raw in text.split():
            token = raw.strip(self._strip_chars)
            if len(token) > 1 or (token and token.lower() in ("a", "i")):
                tokens.append(token)
        return tokens

    @staticmethod
    def _has_mixed_case(tokens: List[str]) -> bool:
        upper = sum(1 for t in tokens if t.isupper())
        return 0 < upper < len(tokens)

    def _token_valence(self, tokens: List[str], i: int, is_cap_diff: bool) -> float:
        lower = tokens[i].lower()
        if lower in self.BOOSTERS:
            return 0.0

        valence = self.LEXICON.get(lower, 0.0)
        if valence == 0.0:
            return 0.0

        if is_cap_diff and tokens[i].isupper():
            valence += CAPS_INCR if valence > 0 else -CAPS_INCR

        # Look back up to three tokens for modifiers and negations
        for distance in range(1, 4):
            if i < distance:
                break
            previous = tokens[i - distance]
            if previous.lower() in self.LEXICON:
                continue

            boost = self._booster_value(previous, valence, is_cap_diff)
            if distance == 2:
                boost *= 0.95
            elif distance == 3:
                boost *= 0.9
            valence += boost

            if previous.lower() in self.NEGATION_WORDS or previous.lower().endswith("n't"):
                valence *= NEGATION_SCALAR

        return valence

    def _booster_value(self, word: str, valence: float, is_cap_diff: bool) -> float:
        scalar = self.BOOSTERS.get(word.lower(), 0.0)
        if scalar == 0.0:
            return 0.0
        if valence < 0:
            scalar *= -1
        if is_cap_diff and word.isupper():
            scalar += CAPS_INCR if valence > 0 else -CAPS_INCR
        return scalar

    @staticmethod
    def _apply_but_rule(tokens: List[str], sentiments: List[float]) -> List[float]:
        """Words before "but" are damped, words after are amplified"""
        lowered = [t.lower() for t in tokens]
        if "but" not in lowered:
            return sentiments

        but_index = lowered.index("but")
        adjusted = []
        for i, valence in enumerate(sentiments):
            if i < but_index:
                adjusted.append(valence * 0.5)
            elif i > but_index:
                adjusted.append(valence * 1.5)
            else:
                adjusted.append(valence)
        return adjusted

    @staticmethod
    def _punctuation_emphasis(text: str) -> float:
        exclamations = min(text.count("!"), EXCLAMATION_MAX)
        emphasis = exclamations * EXCLAMATION_INCR

        questions = text.count("?")
        if questions > 1:
            if questions <= 3:
                emphasis += questions * QUESTION_INCR
            else:
                emphasis += QUESTION_MAX_AMPLIFIER
        return emphasis

    @staticmethod
    def _normalize(total: float) -> float:
        score = total / math.sqrt(total * total + NORMALIZATION_ALPHA)
        return max(-1.0, min(1.0, score))

