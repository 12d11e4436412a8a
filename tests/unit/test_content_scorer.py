"""Tests for the content structural scorer."""

from datetime import datetime, timezone

import pytest

from aeo_metrics.adapters.parsing.content_scorer import ContentScorer, parse_page_date

NOW = datetime(2026, 1, 10, tzinfo=timezone.utc)


@pytest.fixture
def scorer() -> ContentScorer:
    return ContentScorer()


def page(head: str = "", body: str = "") -> str:
    """Helper to wrap markup in a document."""
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestStructure:
    """Tests for the structure dimension."""

    def test_full_structure(self, scorer: ContentScorer) -> None:
        """One H1, 4 subheadings, 2 lists, JSON-LD and a section score 100."""
        html = page(
            head='<script type="application/ld+json">{"@type": "Article"}</script>',
            body=(
                "<article><h1>Title</h1>"
                "<h2>A</h2><h2>B</h2><h3>C</h3><h4>D</h4>"
                "<ul><li>x</li></ul><ol><li>y</li></ol></article>"
            ),
        )
        result = scorer.score(html, now=NOW)
        assert result.structure_score == 100

    def test_structure_is_clamped(self, scorer: ContentScorer) -> None:
        """Extra elements never push the score past 100."""
        body = "<h1>T</h1>" + "<h2>s</h2>" * 10 + "<ul></ul>" * 10 + "<section></section>" * 5
        head = '<script type="application/ld+json">{}</script>' * 3
        assert scorer.score(page(head, body), now=NOW).structure_score == 100

    def test_multiple_h1(self, scorer: ContentScorer) -> None:
        """More than one H1 earns partial credit and a recommendation."""
        result = scorer.score(page(body="<h1>A</h1><h1>B</h1>"), now=NOW)
        assert result.structure_score == 10
        assert "Consider having only one H1 tag per page for better SEO" in result.recommendations

    def test_partial_subheadings_and_single_list(self, scorer: ContentScorer) -> None:
        """1-2 subheadings and one list earn partial credit."""
        result = scorer.score(page(body="<h1>A</h1><h2>B</h2><ul><li>x</li></ul>"), now=NOW)
        assert result.structure_score == 20 + 15 + 10
        assert "Add more subheadings (H2-H6) to improve content structure" in result.recommendations
        assert "Consider using more lists to organize information" in result.recommendations


class TestEmptyPage:
    """Tests for a page with no content."""

    def test_empty_markup(self, scorer: ContentScorer) -> None:
        """Empty markup scores only the neutral freshness default."""
        result = scorer.score("", now=NOW)
        assert result.structure_score == 0
        assert result.readability_score == 0
        assert result.freshness_score == 50
        assert result.key_content_score == 0
        assert result.citation_score == 0
        # 50 * 0.15 = 7.5, rounded half up
        assert result.overall_score == 8
        assert result.recommendations == [
            "Add an H1 tag to your page for better structure",
            "Add subheadings to organize your content better",
            "Use lists (ul/ol) to improve content organization",
            "Add structured data (schema.org/JSON-LD) to enhance content discoverability",
            "Add more substantive content to your page (minimum 300 words recommended)",
            "Add publication or modification dates to your content",
            "Add more paragraphs of substantive content",
            "Add relevant images to your content",
            "Include more internal and external links for context and SEO",
            "Optimize your meta description (50-160 characters)",
            "Include quotes or blockquotes to support your claims",
            "Reference sources and cite data to increase credibility",
        ]


class TestReadability:
    """Tests for the readability dimension."""

    def test_simple_text(self, scorer: ContentScorer) -> None:
        """Easy text scores 100 with no readability recommendation."""
        result = scorer.score(page(body="<p>The cat sat on the mat.</p>"), now=NOW)
        assert result.readability_score == 100
        assert not any("readability" in r for r in result.recommendations)

    def test_script_and_style_excluded(self, scorer: ContentScorer) -> None:
        """Script and style contents are not body text."""
        html = page(
            head="<style>body { color: red; }</style>",
            body="<script>var x = 'according to';</script>",
        )
        result = scorer.score(html, now=NOW)
        assert result.readability_score == 0
        assert "Reference sources and cite data to increase credibility" in result.recommendations

    def test_hard_text_recommends_simpler_words(self, scorer: ContentScorer) -> None:
        """Difficult text triggers the readability recommendation."""
        body = (
            "<p>Comprehensive organizational transformation necessitates interdisciplinary "
            "collaboration, institutional accountability, and sophisticated communication "
            "infrastructure throughout multinational corporations.</p>"
        )
        result = scorer.score(page(body=body), now=NOW)
        assert result.readability_score < 60
        assert "Improve readability by using shorter sentences and simpler words" in result.recommendations


class TestFreshness:
    """Tests for the freshness dimension."""

    @pytest.mark.parametrize("modified,expected", [
        ("2026-01-01T00:00:00Z", 100),
        ("2025-11-01T00:00:00+00:00", 75),
        ("2025-08-01", 50),
        ("2025-03-01T12:00:00Z", 25),
    ])
    def test_buckets(self, scorer: ContentScorer, modified: str, expected: int) -> None:
        """Page age maps onto the freshness buckets."""
        head = f'<meta property="article:modified_time" content="{modified}">'
        assert scorer.score(page(head=head), now=NOW).freshness_score == expected

    def test_stale_page(self, scorer: ContentScorer) -> None:
        """Pages over a year old score 10 and get an update recommendation."""
        head = '<meta property="article:published_time" content="2024-06-01T00:00:00Z">'
        result = scorer.score(page(head=head), now=NOW)
        assert result.freshness_score == 10
        assert "Update your content to reflect current information" in result.recommendations

    def test_rfc2822_last_modified(self, scorer: ContentScorer) -> None:
        """HTTP-style dates are accepted."""
        head = '<meta http-equiv="last-modified" content="Wed, 01 Oct 2025 10:00:00 GMT">'
        # 101 days before NOW
        assert scorer.score(page(head=head), now=NOW).freshness_score == 50

    def test_last_modified_wins_over_published(self, scorer: ContentScorer) -> None:
        """last-modified is checked before article dates."""
        head = (
            '<meta name="last-modified" content="2026-01-05">'
            '<meta property="article:published_time" content="2020-01-01">'
        )
        assert scorer.score(page(head=head), now=NOW).freshness_score == 100

    def test_unparseable_date(self, scorer: ContentScorer) -> None:
        """An unusable date counts as missing."""
        head = '<meta property="article:modified_time" content="sometime last spring">'
        result = scorer.score(page(head=head), now=NOW)
        assert result.freshness_score == 50
        assert "Add publication or modification dates to your content" in result.recommendations

    def test_parse_page_date_naive_is_utc(self) -> None:
        """Dates without an offset are taken as UTC."""
        assert parse_page_date("2025-08-01") == datetime(2025, 8, 1, tzinfo=timezone.utc)
        assert parse_page_date("") is None


class TestKeyContent:
    """Tests for the key content dimension."""

    def test_full_key_content(self, scorer: ContentScorer) -> None:
        """Paragraphs, images, video, links, description and title score 100."""
        head = (
            "<title>Acme guide</title>"
            f'<meta name="description" content="{"d" * 80}">'
        )
        body = (
            "<p>a</p>" * 5
            + '<img src="1.png"><img src="2.png">'
            + '<iframe src="https://www.youtube.com/embed/x"></iframe>'
            + '<a href="/1">1</a><a href="/2">2</a><a href="/3">3</a>'
        )
        assert scorer.score(page(head, body), now=NOW).key_content_score == 100

    def test_partial_key_content(self, scorer: ContentScorer) -> None:
        """3 paragraphs and one image earn partial credit."""
        body = "<p>a</p>" * 3 + '<img src="1.png"><video></video>'
        assert scorer.score(page(body=body), now=NOW).key_content_score == 15 + 15 + 20

    @pytest.mark.parametrize("length,accepted", [
        (49, False),
        (50, True),
        (160, True),
        (161, False),
    ])
    def test_meta_description_range(self, scorer: ContentScorer, length: int, accepted: bool) -> None:
        """Description length must be within 50-160 inclusive."""
        head = f'<meta name="description" content="{"x" * length}">'
        result = scorer.score(page(head=head), now=NOW)
        assert result.key_content_score == (10 if accepted else 0)

    def test_og_title_counts_as_title(self, scorer: ContentScorer) -> None:
        """og:title is used when there is no title tag."""
        head = '<meta property="og:title" content="Acme">'
        assert scorer.score(page(head=head), now=NOW).key_content_score == 5


class TestCitation:
    """Tests for the citation dimension."""

    def test_full_citation(self, scorer: ContentScorer) -> None:
        """Quote, data attribute, citation phrase and a link score 100."""
        body = (
            '<blockquote>Quote</blockquote>'
            '<div data-source="survey">According to the 2025 survey, adoption grew.</div>'
            '<a href="https://example.org">study</a>'
        )
        assert scorer.score(page(body=body), now=NOW).citation_score == 100

    def test_citation_phrase_case_insensitive(self, scorer: ContentScorer) -> None:
        """Citation phrases match regardless of case."""
        result = scorer.score(page(body="<p>RESEARCH SHOWS this works.</p>"), now=NOW)
        assert result.citation_score == 30


class TestOverall:
    """Tests for the weighted overall score."""

    def test_overall_in_range(self, scorer: ContentScorer) -> None:
        """A rich page stays within [0, 100]."""
        head = (
            "<title>Acme</title>"
            f'<meta name="description" content="{"d" * 80}">'
            '<meta property="article:modified_time" content="2026-01-09T00:00:00Z">'
            '<script type="application/ld+json">{}</script>'
        )
        body = (
            "<article><h1>Acme</h1><h2>a</h2><h2>b</h2><h2>c</h2>"
            "<ul><li>x</li></ul><ol><li>y</li></ol>"
            + "<p>The cat sat on the mat. According to data, it is fine.</p>" * 5
            + '<img src="1"><img src="2"><video></video>'
            + '<a href="/1">1</a><a href="/2">2</a><a href="/3">3</a>'
            + '<blockquote data-cite="x">q</blockquote></article>'
        )
        result = scorer.score(page(head, body), now=NOW)
        assert result.structure_score == 100
        assert result.freshness_score == 100
        assert result.key_content_score == 100
        assert result.citation_score == 100
        assert 90 <= result.overall_score <= 100

    def test_to_dict(self, scorer: ContentScorer) -> None:
        """Serialised result has every field."""
        data = scorer.score("", now=NOW).to_dict()
        assert set(data) == {
            "overall_score", "structure_score", "readability_score", "freshness_score",
            "key_content_score", "citation_score", "recommendations",
        }
