"""
Base Engine Client Interface
Every AI answer engine exposes the same query contract
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import httpx


@dataclass
class EngineQuery:
    """A prompt asked on behalf of a brand"""
    prompt: str
    brand_name: str
    brand_url: str


@dataclass
class EngineResponse:
    """Standardized answer across all engines"""
    engine: str  # chatgpt, perplexity, google_aio
    response_text: str
    citation_urls: List[str] = field(default_factory=list)
    raw_response: Dict[str, Any] = field(default_factory=dict)
    queried_at: datetime = field(default_factory=datetime.utcnow)


class EngineClient(ABC):
    """
    Query capability of one answer engine.

    Implementations hold their own credentials and HTTP settings; retry
    is layered on top with RetryingEngineClient.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine identifier stored on results"""
        pass

    @abstractmethod
    async def query(self, query: EngineQuery) -> EngineResponse:
        """
        Ask the engine a prompt.

        Args:
            query: Prompt plus the brand it is asked for

        Returns:
            EngineResponse with text and citation URLs

        Raises:
            EngineClientError: on transport or API failure
        """
        pass


class EngineClientError(Exception):
    """Base exception for engine client errors"""
    def __init__(self, message: str, engine: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.engine = engine
        self.details = details or {}


class EngineRateLimitError(EngineClientError):
    """Rate limit exceeded"""
    pass


class EngineAuthenticationError(EngineClientError):
    """Missing or rejected credentials"""
    pass


class EngineTimeoutError(EngineClientError):
    """Request timed out"""
    pass


class EngineInvalidRequestError(EngineClientError):
    """Request rejected as malformed"""
    pass


_URL_RE = re.compile(r"https?://[^\s<>\"')\]]+")


def extract_urls_from_text(text: str) -> List[str]:
    """URLs found in free text, first-seen order, no duplicates"""
    urls = [u.rstrip(".,;:!?") for u in _URL_RE.findall(text or "")]
    return dedupe(urls)


def dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def build_prompt(query: EngineQuery) -> str:
    """Prompt text with the brand context appended"""
    return f"{query.prompt}\n\nContext: This query is for {query.brand_name} ({query.brand_url})"


async def post_json(
    engine: str,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    POST a JSON payload and return the decoded body.

    Maps HTTP failures onto the EngineClientError hierarchy.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException:
        raise EngineTimeoutError(f"Request timed out after {timeout}s", engine)
    except httpx.RequestError as e:
        raise EngineClientError(f"Request failed: {str(e)}", engine)
    except httpx.InvalidURL as e:
        raise EngineInvalidRequestError(f"Invalid URL: {str(e)}", engine)

    details = {"status_code": response.status_code}
    if response.status_code in (401, 403):
        raise EngineAuthenticationError("Invalid API key", engine, details)
    elif response.status_code == 429:
        raise EngineRateLimitError("Rate limit exceeded", engine, details)
    elif response.status_code in (400, 404, 422):
        details["response"] = response.text
        raise EngineInvalidRequestError(f"Invalid request: {response.text}", engine, details)
    elif not response.is_success:
        details["response"] = response.text
        raise EngineClientError(f"API error: {response.text}", engine, details)

    try:
        return response.json()
    except ValueError:
        details["response"] = response.text[:500]
        raise EngineClientError("Invalid JSON response", engine, details)
