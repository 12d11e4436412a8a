"""
Celery Tasks
"""

from .prompt_tasks import run_prompt_checks
from .snapshot_tasks import aggregate_snapshot
from .alert_tasks import check_alerts
from .content_tasks import score_content

__all__ = [
    "run_prompt_checks",
    "aggregate_snapshot",
    "check_alerts",
    "score_content",
]
