"""
Snapshot Tasks
Daily visibility snapshot aggregation
"""

from typing import Dict, Optional

from celery.utils.log import get_task_logger

from aeo_metrics.workers.celery_app import celery_app
from aeo_metrics.utils.database import get_sync_db
from aeo_metrics.services.snapshot_aggregator import SnapshotAggregator
from ._utils import parse_date, parse_uuid

logger = get_task_logger(__name__)


@celery_app.task(
    bind=True,
    name="aeo_metrics.workers.tasks.snapshot_tasks.aggregate_snapshot",
    max_retries=3,
    default_retry_delay=30,
)
def aggregate_snapshot(self, brand_id: str, snapshot_date: Optional[str] = None) -> Dict:
    """
    Aggregate a brand's prompt results for one day.

    Args:
        brand_id: UUID of the brand
        snapshot_date: ISO date (YYYY-MM-DD), defaults to today UTC

    Returns:
        Dict with snapshot id and metrics
    """
    db = get_sync_db()

    try:
        aggregator = SnapshotAggregator(db)
        result = aggregator.aggregate(parse_uuid(brand_id), parse_date(snapshot_date))

        return {
            "success": result.success,
            "snapshot_created": result.snapshot_created,
            "snapshot_id": str(result.snapshot_id) if result.snapshot_id else None,
            "metrics": result.metrics,
        }

    except ValueError as e:
        logger.error(f"Aggregation skipped for brand {brand_id}: {e}")
        return {"success": False, "error": str(e)}

    except Exception as e:
        logger.exception(f"Aggregation failed for brand {brand_id}: {e}")
        db.rollback()
        raise self.retry(exc=e)
    finally:
        db.close()
