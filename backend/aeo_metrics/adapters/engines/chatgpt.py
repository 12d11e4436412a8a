"""
ChatGPT Engine Client
OpenAI chat completions, citations mined from the answer text
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
    extract_urls_from_text,
    post_json,
)


class ChatGPTClient(EngineClient):
    """Client for the OpenAI chat completions API"""

    API_BASE = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.OPENAI_API_KEY
        if not self.api_key:
            raise EngineAuthenticationError("OPENAI_API_KEY is required for ChatGPT client", self.name)
        self.model = model or settings.CHATGPT_MODEL
        self.timeout = timeout or settings.ENGINE_REQUEST_TIMEOUT
        self.transport = transport

    @property
    def name(self) -> str:
        return "chatgpt"

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

        return EngineResponse(
            engine=self.name,
            response_text=text,
            citation_urls=extract_urls_from_text(text),
            raw_response=data,
        )
