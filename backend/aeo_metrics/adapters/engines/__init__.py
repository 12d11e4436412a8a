"""
Engine Clients - Unified query interface for AI answer engines
"""

from typing import Optional

import httpx

from aeo_metrics.config import get_settings
from .base import (
    EngineClient,
    EngineQuery,
    EngineResponse,
    EngineClientError,
    EngineRateLimitError,
    EngineAuthenticationError,
    EngineTimeoutError,
    EngineInvalidRequestError,
    extract_urls_from_text,
)
from .chatgpt import ChatGPTClient
from .perplexity import PerplexityClient
from .google_aio import GoogleAIOClient
from .retry import RetryingEngineClient


ENGINE_CLIENTS = {
    "chatgpt": ChatGPTClient,
    "perplexity": PerplexityClient,
    "google": GoogleAIOClient,
    "google_aio": GoogleAIOClient,
}


def get_engine_client(
    engine: str,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    retry: bool = True,
) -> EngineClient:
    """
    Factory function to get the client for an engine.

    Args:
        engine: One of "chatgpt", "perplexity", "google_aio" ("google" accepted)
        api_key: Optional API key (uses settings if not provided)
        transport: Optional httpx transport, used by tests
        retry: Wrap the client in RetryingEngineClient

    Returns:
        Configured engine client

    Raises:
        ValueError: If engine is not supported
    """
    key = (engine or "").lower()
    if key not in ENGINE_CLIENTS:
        raise ValueError(f"Unknown engine: {engine}. Must be one of {list(ENGINE_CLIENTS.keys())}")

    client = ENGINE_CLIENTS[key](api_key=api_key, transport=transport)
    if not retry:
        return client

    settings = get_settings()
    return RetryingEngineClient(
        client,
        max_retries=settings.ENGINE_MAX_RETRIES,
        base_delay=settings.ENGINE_RETRY_BASE_DELAY,
    )


__all__ = [
    # Factory
    "get_engine_client",
    # Base classes
    "EngineClient",
    "EngineQuery",
    "EngineResponse",
    "extract_urls_from_text",
    # Exceptions
    "EngineClientError",
    "EngineRateLimitError",
    "EngineAuthenticationError",
    "EngineTimeoutError",
    "EngineInvalidRequestError",
    # Clients
    "ChatGPTClient",
    "PerplexityClient",
    "GoogleAIOClient",
    "RetryingEngineClient",
]
