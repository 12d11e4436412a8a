"""
AEO metrics database models
SQLAlchemy ORM, PostgreSQL in production (portable types for SQLite)
"""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, Date, DateTime,
    ForeignKey, JSON, Numeric, Index, UniqueConstraint, Uuid
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON everywhere else
JSONType = JSON().with_variant(JSONB(), "postgresql")


# ============================================================================
# ENUMS
# ============================================================================

class Engine(str, PyEnum):
    CHATGPT = "chatgpt"
    PERPLEXITY = "perplexity"
    GOOGLE_AIO = "google_aio"


class SentimentLabel(str, PyEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class AlertType(str, PyEnum):
    VISIBILITY_DROP = "visibility_drop"
    NEW_MENTION = "new_mention"
    SENTIMENT_SHIFT = "sentiment_shift"
    COMPETITOR_NEW = "competitor_new"


class AlertSeverity(str, PyEnum):
    INFO = "info"
    WARNING = "warning"


# ============================================================================
# OWNERSHIP
# ============================================================================

class User(Base):
    """Account that owns brands; only the fields the pipeline reads"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    plan_id = Column(String(50), default="free", nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    brands = relationship("Brand", back_populates="owner", cascade="all, delete-orphan")
    notification_settings = relationship(
        "NotificationSettings", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Brand(Base):
    """A tracked brand and its website"""
    __tablename__ = "brands"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    website_url = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="brands")
    competitors = relationship("Competitor", back_populates="brand", cascade="all, delete-orphan")
    prompts = relationship("Prompt", back_populates="brand", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_brand_user', 'user_id'),
    )


class Competitor(Base):
    """Competitor tracked alongside a brand"""
    __tablename__ = "competitors"

    id = Column(Uuid, primary_key=True, default=uuid4)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    website_url = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    brand = relationship("Brand", back_populates="competitors")

    __table_args__ = (
        Index('idx_competitor_brand', 'brand_id'),
    )


class Prompt(Base):
    """A question asked of every enabled engine"""
    __tablename__ = "prompts"

    id = Column(Uuid, primary_key=True, default=uuid4)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False)

    text = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    brand = relationship("Brand", back_populates="prompts")
    results = relationship("PromptResult", back_populates="prompt", cascade="all, delete-orphan")


# ============================================================================
# RESULTS & SNAPSHOTS
# ============================================================================

class PromptResult(Base):
    """One engine answer for one prompt, scored. Never updated once written."""
    __tablename__ = "prompt_results"

    id = Column(Uuid, primary_key=True, default=uuid4)
    prompt_id = Column(Uuid, ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False)

    engine = Column(String(50), nullable=False)
    response_text = Column(Text, nullable=False)

    # Brand mention
    brand_mentioned = Column(Boolean, default=False)
    mention_position = Column(Integer)
    mention_count = Column(Integer, default=0)

    # Whole-response sentiment
    sentiment_score = Column(Float)  # -1.0 to 1.0
    sentiment_label = Column(String(20))

    citation_urls = Column(JSONType, default=list)
    competitor_mentions = Column(JSONType, default=list)  # [{name, position, sentiment}]

    visibility_score = Column(Integer, default=0)  # 0-100
    raw_response = Column(JSONType)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    prompt = relationship("Prompt", back_populates="results")

    __table_args__ = (
        Index('idx_result_brand_created', 'brand_id', 'created_at'),
        Index('idx_result_engine', 'engine'),
    )


class VisibilitySnapshot(Base):
    """Daily aggregate of a brand's results across engines"""
    __tablename__ = "visibility_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid4)
    brand_id = Column(Uuid, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False)
    snapshot_date = Column(Date, nullable=False)

    overall_score = Column(Integer, default=0)
    chatgpt_score = Column(Integer)      # NULL when the engine had no results
    perplexity_score = Column(Integer)
    google_aio_score = Column(Integer)

    # Percent of results per sentiment label
    sentiment_positive = Column(Numeric(5, 2, asdecimal=False), default=0)
    sentiment_neutral = Column(Numeric(5, 2, asdecimal=False), default=0)
    sentiment_negative = Column(Numeric(5, 2, asdecimal=False), default=0)

    total_mentions = Column(Integer, default=0)
    total_prompts_checked = Column(Integer, default=0)

    # {name: {"mentions": int, "sentiment": {"positive": int, "neutral": int, "negative": int}}}
    competitor_data = Column(JSONType, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint('brand_id', 'snapshot_date', name='uq_snapshot_brand_date'),
        Index('idx_snapshot_brand_date', 'brand_id', 'snapshot_date'),
    )


class ContentScore(Base):
    """Page optimisation score for one URL at one point in time"""
    __tablename__ = "content_scores"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    url = Column(Text, nullable=False)
    overall_score = Column(Integer, nullable=False)
    structure_score = Column(Integer)
    readability_score = Column(Integer)
    freshness_score = Column(Integer)
    key_content_score = Column(Integer)
    citation_score = Column(Integer)
    recommendations = Column(JSONType, default=list)

    scored_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_content_score_user', 'user_id', 'scored_at'),
    )


# ============================================================================
# NOTIFICATIONS
# ============================================================================

class Notification(Base):
    """In-app record of a triggered alert"""
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text)
    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSONType, default=dict)

    read_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_notification_user', 'user_id'),
        Index('idx_notification_type', 'type'),
    )


class NotificationSettings(Base):
    """Per-user alert toggles and optional webhook"""
    __tablename__ = "notification_settings"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    alert_visibility_drop = Column(Boolean, default=True)
    alert_new_mention = Column(Boolean, default=True)
    alert_sentiment_shift = Column(Boolean, default=True)
    alert_competitor_new = Column(Boolean, default=True)
    webhook_url = Column(Text)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="notification_settings")
