"""
Google AI Overviews Engine Client
Answer box and organic results through the serper.dev search API
"""

from typing import Optional

import httpx

from aeo_metrics.config import get_settings
from .base import (
    EngineClient,
    EngineQuery,
    EngineResponse,
    EngineAuthenticationError,
    dedupe,
    post_json,
)

ORGANIC_SNIPPETS = 3


class GoogleAIOClient(EngineClient):
    """
    Client for Google results via serper.dev.

    The answer box snippet is used as the answer when present, otherwise
    the first organic results are stitched together. Every organic link
    counts as a citation.
    """

    API_URL = "https://google.serper.dev/search"

    def __init__(
        self,
        api_key: Optional[str] = None,
        country: Optional[str] = None,
        language: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.SERPER_API_KEY
        if not self.api_key:
            raise EngineAuthenticationError("SERPER_API_KEY is required for Google AIO client", self.name)
        self.country = country or settings.SERPER_COUNTRY
        self.language = language or settings.SERPER_LANGUAGE
        self.timeout = timeout or settings.ENGINE_REQUEST_TIMEOUT
        self.transport = transport

    @property
    def name(self) -> str:
        return "google_aio"

    async def query(self, query: EngineQuery) -> EngineResponse:
        payload = {
            "q": f"{query.prompt} {query.brand_name}",
            "gl": self.country,
            "hl": self.language,
        }
        headers = {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

        data = await post_json(self.name, self.API_URL, payload, headers, self.timeout, self.transport)

        text = ""
        citations = []

        answer_box = data.get("answerBox") or {}
        if answer_box.get("snippet"):
            text = answer_box["snippet"]
            citations.extend(s.get("link") for s in answer_box.get("sources") or [])

        organic = data.get("organic") or []
        if organic:
            if not text:
                text = "\n\n".join(
                    f"{r.get('title', '')}: {r.get('snippet', '')}"
                    for r in organic[:ORGANIC_SNIPPETS]
                )
            citations.extend(r.get("link") for r in organic)

        return EngineResponse(
            engine=self.name,
            response_text=text or "No results found",
            citation_urls=dedupe(c for c in citations if c),
            raw_response=data,
        )
