"""
Content Tasks
Score fetched page markup and store the result
"""

from typing import Dict

from celery.utils.log import get_task_logger

from aeo_metrics.workers.celery_app import celery_app
from aeo_metrics.utils.database import get_sync_db
from aeo_metrics.adapters.parsing.content_scorer import ContentScorer
from aeo_metrics.models import ContentScore
from aeo_metrics.schemas import ContentScoreResponse
from ._utils import parse_uuid

logger = get_task_logger(__name__)


@celery_app.task(
    bind=True,
    name="aeo_metrics.workers.tasks.content_tasks.score_content",
    max_retries=2,
    default_retry_delay=10,
)
def score_content(self, user_id: str, url: str, html: str) -> Dict:
    """
    Score a page and persist a ContentScore row.

    Args:
        user_id: UUID of the requesting user
        url: Page URL
        html: Page markup, already fetched

    Returns:
        Dict with the stored score
    """
    db = get_sync_db()

    try:
        result = ContentScorer().score(html, url)

        record = ContentScore(
            user_id=parse_uuid(user_id),
            url=url,
            overall_score=result.overall_score,
            structure_score=result.structure_score,
            readability_score=result.readability_score,
            freshness_score=result.freshness_score,
            key_content_score=result.key_content_score,
            citation_score=result.citation_score,
            recommendations=result.recommendations,
        )
        db.add(record)
        db.commit()
        db.refresh(record)

        logger.info(f"Content scored for {url}: {result.overall_score}")
        return {
            "success": True,
            "content_score": ContentScoreResponse.model_validate(record).model_dump(mode="json"),
        }

    except Exception as e:
        logger.exception(f"Content scoring failed for {url}: {e}")
        db.rollback()
        raise self.retry(exc=e)
    finally:
        db.close()
