"""
Notification & Webhook Schemas
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field


class WebhookPayload(BaseModel):
    """JSON body POSTed to a user's webhook for each alert"""
    type: str
    title: str
    body: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
