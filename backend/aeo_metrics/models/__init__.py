"""
Database Models for the AEO metrics pipeline
"""

from .database import (
    Base,
    # Enums
    Engine,
    SentimentLabel,
    AlertType,
    AlertSeverity,
    # Models
    User,
    Brand,
    Competitor,
    Prompt,
    PromptResult,
    VisibilitySnapshot,
    ContentScore,
    Notification,
    NotificationSettings,
)

__all__ = [
    "Base",
    # Enums
    "Engine",
    "SentimentLabel",
    "AlertType",
    "AlertSeverity",
    # Models
    "User",
    "Brand",
    "Competitor",
    "Prompt",
    "PromptResult",
    "VisibilitySnapshot",
    "ContentScore",
    "Notification",
    "NotificationSettings",
]
