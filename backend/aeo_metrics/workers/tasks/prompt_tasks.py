"""
Prompt Tasks
Query answer engines for a brand's prompts and store scored results
"""

from typing import Dict, Optional

from celery.utils.log import get_task_logger

from aeo_metrics.workers.celery_app import celery_app
from aeo_metrics.utils.database import get_sync_db
from aeo_metrics.services.prompt_runner import PromptRunner
from ._utils import parse_uuid, run_async

logger = get_task_logger(__name__)


@celery_app.task(
    bind=True,
    name="aeo_metrics.workers.tasks.prompt_tasks.run_prompt_checks",
    max_retries=3,
    default_retry_delay=60,
)
def run_prompt_checks(self, brand_id: str, prompt_id: Optional[str] = None) -> Dict:
    """
    Run a brand's active prompts (or one prompt) against its plan's engines.

    Args:
        brand_id: UUID of the brand
        prompt_id: Optional UUID of a single prompt

    Returns:
        Dict with prompt and result counts
    """
    db = get_sync_db()

    try:
        logger.info(f"Starting prompt checks for brand {brand_id}")
        runner = PromptRunner(db)
        summary = run_async(runner.run(
            parse_uuid(brand_id),
            parse_uuid(prompt_id) if prompt_id else None,
        ))

        logger.info(
            f"Prompt checks completed for brand {brand_id}: "
            f"{summary.prompts_processed} prompts, {summary.results_created} results"
        )
        return {
            "success": True,
            "brand_id": brand_id,
            "prompts_processed": summary.prompts_processed,
            "results_created": summary.results_created,
            "failures": summary.failures,
        }

    except ValueError as e:
        logger.error(f"Prompt checks skipped for brand {brand_id}: {e}")
        return {"success": False, "error": str(e)}

    except Exception as e:
        logger.exception(f"Prompt checks failed for brand {brand_id}: {e}")
        db.rollback()
        raise self.retry(exc=e)
    finally:
        db.close()
