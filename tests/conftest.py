"""Pytest configuration and fixtures."""

import os
from datetime import datetime
from typing import Generator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before any package code runs
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["PERPLEXITY_API_KEY"] = "test-perplexity-key"
os.environ["SERPER_API_KEY"] = "test-serper-key"


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """In-memory SQLite session with all tables created."""
    from aeo_metrics.config import get_settings

    get_settings.cache_clear()  # Use test env, not stale or .env values
    from aeo_metrics.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False)()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


def make_brand(
    db: Session,
    name: str = "Acme",
    website_url: str = "https://www.acme.com",
    plan_id: str = "free",
    email: Optional[str] = None,
):
    """Helper to create a user and one brand."""
    from aeo_metrics.models import Brand, User

    user = User(email=email or f"{name.lower()}@example.com", plan_id=plan_id)
    db.add(user)
    db.flush()
    brand = Brand(user_id=user.id, name=name, website_url=website_url)
    db.add(brand)
    db.commit()
    return brand


def make_result(
    db: Session,
    brand,
    engine: str,
    visibility_score: Optional[int],
    sentiment_label: str = "neutral",
    brand_mentioned: bool = False,
    competitor_mentions: Optional[list] = None,
    created_at: Optional[datetime] = None,
):
    """Helper to store one prompt result for a brand."""
    from aeo_metrics.models import Prompt, PromptResult

    prompt = db.query(Prompt).filter(Prompt.brand_id == brand.id).first()
    if prompt is None:
        prompt = Prompt(brand_id=brand.id, text="best project management tools")
        db.add(prompt)
        db.flush()

    result = PromptResult(
        prompt_id=prompt.id,
        brand_id=brand.id,
        engine=engine,
        response_text="response",
        brand_mentioned=brand_mentioned,
        sentiment_score=0.0,
        sentiment_label=sentiment_label,
        competitor_mentions=competitor_mentions or [],
        visibility_score=visibility_score,
        created_at=created_at or datetime(2026, 1, 15, 10, 0, 0),
    )
    db.add(result)
    db.commit()
    return result


@pytest.fixture
def brand_factory(db_session: Session):
    """Create brands bound to the test session."""
    def factory(**kwargs):
        return make_brand(db_session, **kwargs)
    return factory


@pytest.fixture
def result_factory(db_session: Session):
    """Create prompt results bound to the test session."""
    def factory(brand, engine: str, visibility_score: Optional[int], **kwargs):
        return make_result(db_session, brand, engine, visibility_score, **kwargs)
    return factory
