"""
Pydantic schemas for payloads leaving the pipeline
"""

from .content import ContentScoreResponse
from .notification import WebhookPayload

__all__ = [
    "ContentScoreResponse",
    "WebhookPayload",
]
