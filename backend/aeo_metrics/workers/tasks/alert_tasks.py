"""
Alert Tasks
Evaluate alert rules for a brand's daily snapshot
"""

from typing import Dict, Optional

from celery.utils.log import get_task_logger

from aeo_metrics.workers.celery_app import celery_app
from aeo_metrics.utils.database import get_sync_db
from aeo_metrics.services.alert_service import AlertService
from ._utils import parse_date, parse_uuid

logger = get_task_logger(__name__)


@celery_app.task(
    bind=True,
    name="aeo_metrics.workers.tasks.alert_tasks.check_alerts",
    max_retries=3,
    default_retry_delay=30,
)
def check_alerts(self, brand_id: str, snapshot_date: Optional[str] = None) -> Dict:
    """
    Check a brand's snapshot against the previous one and notify.

    Args:
        brand_id: UUID of the brand
        snapshot_date: ISO date (YYYY-MM-DD), defaults to today UTC

    Returns:
        Dict with created alert and webhook counts
    """
    db = get_sync_db()

    try:
        service = AlertService(db)
        summary = service.check_alerts(parse_uuid(brand_id), parse_date(snapshot_date))

        return {
            "success": summary.success,
            "alerts_created": summary.alerts_created,
            "webhooks_sent": summary.webhooks_sent,
            "alert_types": [event.type.value for event in summary.events],
        }

    except ValueError as e:
        logger.error(f"Alert check skipped for brand {brand_id}: {e}")
        return {"success": False, "error": str(e)}

    except Exception as e:
        logger.exception(f"Alert check failed for brand {brand_id}: {e}")
        db.rollback()
        raise self.retry(exc=e)
    finally:
        db.close()
