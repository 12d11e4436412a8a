"""
Retry decorator for engine clients
Exponential backoff around any EngineClient
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .base import (
    EngineClient,
    EngineQuery,
    EngineResponse,
    EngineClientError,
    EngineAuthenticationError,
    EngineInvalidRequestError,
)

logger = logging.getLogger(__name__)

# Retrying these cannot succeed
NON_RETRYABLE = (EngineAuthenticationError, EngineInvalidRequestError)


class RetryingEngineClient(EngineClient):
    """
    Wraps an engine client and retries failed queries.

    The delay before retry n (0-based) is base_delay * 2**n seconds.
    Authentication and invalid-request errors are raised immediately.
    """

    def __init__(
        self,
        inner: EngineClient,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.inner = inner
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep or asyncio.sleep

    @property
    def name(self) -> str:
        return self.inner.name

    async def query(self, query: EngineQuery) -> EngineResponse:
        attempt = 0
        while True:
            try:
                return await self.inner.query(query)
            except NON_RETRYABLE:
                raise
            except EngineClientError as e:
                if attempt >= self.max_retries:
                    raise
                delay = self.base_delay * (2 ** attempt)
                logger.warning(
                    f"{self.name} attempt {attempt + 1} failed, retrying in {delay}s: {e}"
                )
                await self._sleep(delay)
                attempt += 1
