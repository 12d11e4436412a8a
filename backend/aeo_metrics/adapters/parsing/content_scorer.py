"""
Content Scorer
Scores a page's markup for answer-engine friendliness across five dimensions
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional

from bs4 import BeautifulSoup, Comment

from aeo_metrics.adapters.parsing.readability import ReadabilityError, flesch_reading_ease
from aeo_metrics.config import (
    CONTENT_SCORE_WEIGHTS,
    FRESHNESS_BUCKETS,
    FRESHNESS_DEFAULT_SCORE,
    FRESHNESS_STALE_SCORE,
)
from aeo_metrics.utils.numbers import clamp, round_half_up

logger = logging.getLogger(__name__)

CITATION_PATTERN = re.compile(
    r"cited|source|according to|research shows|studies indicate|data shows",
    re.IGNORECASE,
)

# Checked in order, first present wins
FRESHNESS_META_SELECTORS = [
    'meta[http-equiv="last-modified"]',
    'meta[name="last-modified"]',
    'meta[property="article:modified_time"]',
    'meta[property="article:published_time"]',
]

META_DESCRIPTION_MIN = 50
META_DESCRIPTION_MAX = 160
MIN_WORD_COUNT = 300
READABLE_FLESCH = 60


@dataclass
class ContentScoreResult:
    """Overall and per-dimension content scores (0-100)"""
    overall_score: int
    structure_score: int
    readability_score: int
    freshness_score: int
    key_content_score: int
    citation_score: int
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "structure_score": self.structure_score,
            "readability_score": self.readability_score,
            "freshness_score": self.freshness_score,
            "key_content_score": self.key_content_score,
            "citation_score": self.citation_score,
            "recommendations": list(self.recommendations),
        }


def parse_page_date(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 or RFC 2822 date; naive values are taken as UTC"""
    value = (value or "").strip()
    if not value:
        return None

    parsed = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ContentScorer:
    """
    Structural scorer for HTML pages.

    Stateless: score() only reads the markup handed to it. The clock is
    injectable so freshness is deterministic under test.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def score(self, html: str, url: str = "", now: Optional[datetime] = None) -> ContentScoreResult:
        """
        Score page markup.

        Args:
            html: Raw page markup
            url: Source URL, informational only
            now: Reference time for freshness, defaults to current UTC time

        Returns:
            ContentScoreResult with sub-scores and ordered recommendations
        """
        soup = BeautifulSoup(html or "", self.parser)
        recommendations: List[str] = []
        text = self._body_text(soup)

        structure = self._score_structure(soup, recommendations)
        readability = self._score_readability(text, recommendations)
        freshness = self._score_freshness(soup, now, recommendations)
        key_content = self._score_key_content(soup, recommendations)
        citation = self._score_citation(soup, text, recommendations)

        weighted = (
            structure * CONTENT_SCORE_WEIGHTS["structure"]
            + readability * CONTENT_SCORE_WEIGHTS["readability"]
            + freshness * CONTENT_SCORE_WEIGHTS["freshness"]
            + key_content * CONTENT_SCORE_WEIGHTS["key_content"]
            + citation * CONTENT_SCORE_WEIGHTS["citation"]
        )

        result = ContentScoreResult(
            overall_score=int(clamp(round_half_up(weighted))),
            structure_score=int(structure),
            readability_score=round_half_up(readability),
            freshness_score=int(freshness),
            key_content_score=int(key_content),
            citation_score=int(citation),
            recommendations=recommendations,
        )
        logger.debug(f"Scored content {url or '<inline>'}: {result.overall_score}")
        return result

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def _score_structure(self, soup: BeautifulSoup, recommendations: List[str]) -> float:
        score = 0

        h1_count = len(soup.find_all("h1"))
        if h1_count == 1:
            score += 20
        elif h1_count > 1:
            score += 10
            recommendations.append("Consider having only one H1 tag per page for better SEO")
        else:
            recommendations.append("Add an H1 tag to your page for better structure")

        subheadings = len(soup.find_all(["h2", "h3", "h4", "h5", "h6"]))
        if subheadings >= 3:
            score += 25
        elif subheadings > 0:
            score += 15
            recommendations.append("Add more subheadings (H2-H6) to improve content structure")
        else:
            recommendations.append("Add subheadings to organize your content better")

        lists = len(soup.find_all(["ul", "ol"]))
        if lists >= 2:
            score += 20
        elif lists == 1:
            score += 10
            recommendations.append("Consider using more lists to organize information")
        else:
            recommendations.append("Use lists (ul/ol) to improve content organization")

        if soup.select('script[type="application/ld+json"]'):
            score += 20
        else:
            recommendations.append(
                "Add structured data (schema.org/JSON-LD) to enhance content discoverability"
            )

        if soup.find_all(["article", "section", "aside", "nav"]):
            score += 15

        return clamp(score)

    def _score_readability(self, text: str, recommendations: List[str]) -> float:
        try:
            stats = flesch_reading_ease(text)
        except ReadabilityError:
            word_count = len(text.split())
            if word_count < MIN_WORD_COUNT:
                recommendations.append(
                    "Add more substantive content to your page (minimum 300 words recommended)"
                )
            return clamp(word_count / 500 * 100)

        if stats.reading_ease < READABLE_FLESCH:
            recommendations.append("Improve readability by using shorter sentences and simpler words")
        return clamp(stats.reading_ease)

    def _score_freshness(
        self,
        soup: BeautifulSoup,
        now: Optional[datetime],
        recommendations: List[str],
    ) -> float:
        raw_date = None
        for selector in FRESHNESS_META_SELECTORS:
            tag = soup.select_one(selector)
            if tag and tag.get("content"):
                raw_date = tag["content"]
                break

        modified = parse_page_date(raw_date) if raw_date else None
        if raw_date and modified is None:
            logger.warning(f"Unparseable page date: {raw_date!r}")

        if modified is None:
            recommendations.append("Add publication or modification dates to your content")
            return FRESHNESS_DEFAULT_SCORE

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        days_old = (now - modified).total_seconds() / 86400

        for max_days, bucket_score in FRESHNESS_BUCKETS:
            if days_old < max_days:
                return bucket_score

        recommendations.append("Update your content to reflect current information")
        return FRESHNESS_STALE_SCORE

    def _score_key_content(self, soup: BeautifulSoup, recommendations: List[str]) -> float:
        score = 0

        paragraphs = len(soup.find_all("p"))
        if paragraphs >= 5:
            score += 25
        elif paragraphs >= 3:
            score += 15
        else:
            recommendations.append("Add more paragraphs of substantive content")

        images = len(soup.find_all("img"))
        if images >= 2:
            score += 25
        elif images == 1:
            score += 15
        else:
            recommendations.append("Add relevant images to your content")

        if self._has_video(soup):
            score += 20

        if len(soup.find_all("a")) >= 3:
            score += 15
        else:
            recommendations.append("Include more internal and external links for context and SEO")

        description_tag = soup.find("meta", attrs={"name": "description"})
        description = description_tag.get("content", "") if description_tag else ""
        if META_DESCRIPTION_MIN <= len(description) <= META_DESCRIPTION_MAX:
            score += 10
        else:
            recommendations.append("Optimize your meta description (50-160 characters)")

        if self._page_title(soup):
            score += 5

        return clamp(score)

    def _score_citation(self, soup: BeautifulSoup, text: str, recommendations: List[str]) -> float:
        score = 0

        if soup.find("blockquote") or soup.find("q"):
            score += 30
        else:
            recommendations.append("Include quotes or blockquotes to support your claims")

        if self._has_data_attributes(soup):
            score += 20

        if CITATION_PATTERN.search(text):
            score += 30
        else:
            recommendations.append("Reference sources and cite data to increase credibility")

        if soup.find("a"):
            score += 20

        return clamp(score)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _body_text(soup: BeautifulSoup) -> str:
        """Visible text of the page, excluding script and style contents"""
        root = soup.body or soup
        pieces = []
        for string in root.find_all(string=True):
            if isinstance(string, Comment):
                continue
            if string.parent is not None and string.parent.name in ("script", "style", "noscript", "title"):
                continue
            pieces.append(str(string))
        return " ".join(" ".join(pieces).split())

    @staticmethod
    def _has_video(soup: BeautifulSoup) -> bool:
        if soup.find("video"):
            return True
        for iframe in soup.find_all("iframe"):
            src = iframe.get("src", "")
            if "youtube" in src or "vimeo" in src:
                return True
        return False

    @staticmethod
    def _has_data_attributes(soup: BeautifulSoup) -> bool:
        return any(
            any(attr.startswith("data-") for attr in tag.attrs)
            for tag in soup.find_all(True)
        )

    @staticmethod
    def _page_title(soup: BeautifulSoup) -> str:
        if soup.title and soup.title.get_text(strip=True):
            return soup.title.get_text(strip=True)
        og_title = soup.find("meta", attrs={"property": "og:title"})
        return og_title.get("content", "") if og_title else ""
