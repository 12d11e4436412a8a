"""
Webhook Notifier
Best-effort JSON delivery of alert events to a user's webhook
"""

import logging
from typing import Any, Dict, Optional

import httpx

from aeo_metrics.config import get_settings
from aeo_metrics.schemas import WebhookPayload

logger = logging.getLogger(__name__)


def _short_url(url: str) -> str:
    return url[:50] + "..." if len(url) > 50 else url


class WebhookNotifier:
    """
    Sends one POST per notification.

    Any 2xx response is success. Other statuses and transport errors are
    logged and reported as False; nothing is raised or retried.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout or get_settings().WEBHOOK_TIMEOUT
        self.transport = transport

    def send(
        self,
        webhook_url: str,
        type: str,
        title: str,
        body: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """POST the notification; returns True on a 2xx response"""
        if not webhook_url:
            return False

        payload = WebhookPayload(type=type, title=title, body=body, metadata=metadata or {})

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    webhook_url,
                    content=payload.model_dump_json(),
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to send webhook notification to {_short_url(webhook_url)}: {e}")
            return False

        if not response.is_success:
            logger.error(
                f"Failed to send webhook notification to {_short_url(webhook_url)}: "
                f"HTTP {response.status_code}"
            )
            return False

        logger.info(f"Webhook notification sent to {_short_url(webhook_url)} ({type})")
        return True
