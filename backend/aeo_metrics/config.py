"""
Configuration management for the AEO metrics pipeline
Environment-based settings with secure defaults
"""

from functools import lru_cache
from typing import Dict, List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "aeo-metrics"
    APP_ENV: str = "development"  # development, staging, production
    DEBUG: bool = False

    # Database
    DATABASE_URL: str  # Required
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"

    # Engine API keys
    OPENAI_API_KEY: Optional[str] = None
    PERPLEXITY_API_KEY: Optional[str] = None
    SERPER_API_KEY: Optional[str] = None  # serper.dev, used for Google AI Overviews

    # Engine models
    CHATGPT_MODEL: str = "gpt-4o-mini"
    PERPLEXITY_MODEL: str = "sonar"
    SERPER_COUNTRY: str = "us"
    SERPER_LANGUAGE: str = "en"

    # Engine execution
    ENGINE_REQUEST_TIMEOUT: int = 60  # seconds
    ENGINE_MAX_RETRIES: int = 3
    ENGINE_RETRY_BASE_DELAY: float = 1.0  # seconds, doubled per attempt

    # Webhook delivery
    WEBHOOK_TIMEOUT: float = 10.0  # seconds

    # Alert thresholds
    ALERT_VISIBILITY_DROP_PERCENT: float = 10.0
    ALERT_SENTIMENT_SHIFT_POINTS: float = 5.0

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings loader"""
    return Settings()


# Engines tracked per snapshot, in column order
ENGINES: List[str] = ["chatgpt", "perplexity", "google_aio"]

ENGINE_DISPLAY_NAMES = {
    "chatgpt": "ChatGPT",
    "perplexity": "Perplexity",
    "google_aio": "Google AI Overviews",
}

# Engines included in each plan
PLAN_ENGINES: Dict[str, List[str]] = {
    "free": ["chatgpt"],
    "pro": ["chatgpt", "perplexity"],
    "enterprise": ["chatgpt", "perplexity", "google_aio"],
}

# Live per-result visibility score (mention 50, position 30, sentiment 20)
VISIBILITY_SCORE_WEIGHTS = {
    "mention_present": 50,
    "position_top_5": 30,
    "position_top_10": 15,
    "sentiment_positive": 20,
    "sentiment_neutral": 10,
    "sentiment_negative": 0,
}

# General-purpose analyzer score
GENERAL_VISIBILITY_WEIGHTS = {
    "mention_present": 40,
    "position_max_bonus": 20,
    "position_decay": 2,
    "positive_sentiment": 15,
    "citation_present": 15,
    "few_competitors": 10,
    "few_competitors_limit": 3,
}

# Content score dimension weights (sum to 1.0)
CONTENT_SCORE_WEIGHTS = {
    "structure": 0.20,
    "readability": 0.25,
    "freshness": 0.15,
    "key_content": 0.25,
    "citation": 0.15,
}

# Page age (days) -> freshness score, first matching bucket wins
FRESHNESS_BUCKETS = [
    (30, 100),
    (90, 75),
    (180, 50),
    (365, 25),
]
FRESHNESS_STALE_SCORE = 10
FRESHNESS_DEFAULT_SCORE = 50


def get_enabled_engines(plan_id: Optional[str]) -> List[str]:
    """Engines available on a plan; unknown plans fall back to the free tier"""
    return list(PLAN_ENGINES.get(plan_id or "", PLAN_ENGINES["free"]))
