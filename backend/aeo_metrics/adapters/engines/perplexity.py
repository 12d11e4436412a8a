"""
Perplexity Engine Client
Specialized for citation-rich responses
"""

from typing import Optional

import httpx

from aeo_metrics.config import get_settings
from .base import (
    EngineClient,
    EngineQuery,
    EngineResponse,
    EngineAuthenticationError,
    build_prompt,
    dedupe,
    extract_urls_from_text,
    post_json,
)


class PerplexityClient(EngineClient):
    """
    Client for the Perplexity API (OpenAI-compatible format).
    Perplexity returns source citations natively; they are merged with
    any URLs written into the answer.
    """

    API_BASE = "https://api.perplexity.ai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.PERPLEXITY_API_KEY
        if not self.api_key:
            raise EngineAuthenticationError("PERPLEXITY_API_KEY is required for Perplexity client", self.name)
        self.model = model or settings.PERPLEXITY_MODEL
        self.timeout = timeout or settings.ENGINE_REQUEST_TIMEOUT
        self.transport = transport

    @property
    def name(self) -> str:
        return "perplexity"

    async def query(self, query: EngineQuery) -> EngineResponse:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": build_prompt(query)}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        data = await post_json(
            self.name,
            f"{self.API_BASE}/chat/completions",
            payload,
            headers,
            self.timeout,
            self.transport,
        )

        choices = data.get("choices") or [{}]
        text = (choices[0].get("message") or {}).get("content") or "No response received"
        native = [c for c in data.get("citations") or [] if isinstance(c, str)]

        return EngineResponse(
            engine=self.name,
            response_text=text,
            citation_urls=dedupe(native + extract_urls_from_text(text)),
            raw_response=data,
        )
