"""
Content Score Schemas
"""

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class ContentScoreResponse(BaseModel):
    """Stored content score"""
    id: UUID
    user_id: UUID
    url: str
    overall_score: int = Field(..., ge=0, le=100)
    structure_score: int
    readability_score: int
    freshness_score: int
    key_content_score: int
    citation_score: int
    recommendations: List[str]
    scored_at: datetime

    class Config:
        from_attributes = True
