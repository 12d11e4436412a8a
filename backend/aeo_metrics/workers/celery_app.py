"""
Celery Application Configuration
Queue-based execution of prompt checks, aggregation, alerting and content scoring
"""

from celery import Celery
from kombu import Queue, Exchange

from aeo_metrics.config import get_settings

settings = get_settings()

# Create Celery app
celery_app = Celery(
    "aeo_metrics",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "aeo_metrics.workers.tasks.prompt_tasks",
        "aeo_metrics.workers.tasks.snapshot_tasks",
        "aeo_metrics.workers.tasks.alert_tasks",
        "aeo_metrics.workers.tasks.content_tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Result backend settings
    result_expires=86400,  # 24 hours

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completion
    task_reject_on_worker_lost=True,
    task_time_limit=600,  # Prompt checks call several engines
    task_soft_time_limit=540,

    # Worker settings
    worker_prefetch_multiplier=1,  # Fair distribution
    worker_concurrency=4,

    # Retry settings
    task_default_retry_delay=30,
    task_max_retries=3,

    # Queue configuration
    task_queues=(
        Queue("default", Exchange("default"), routing_key="default"),
        Queue("engine_queries", Exchange("engine_queries"), routing_key="engine"),
        Queue("aggregation", Exchange("aggregation"), routing_key="aggregate"),
        Queue("alerts", Exchange("alerts"), routing_key="alert"),
        Queue("content", Exchange("content"), routing_key="content"),
    ),

    task_default_queue="default",
    task_default_exchange="default",
    task_default_routing_key="default",

    # Route tasks to appropriate queues
    task_routes={
        "aeo_metrics.workers.tasks.prompt_tasks.*": {"queue": "engine_queries"},
        "aeo_metrics.workers.tasks.snapshot_tasks.*": {"queue": "aggregation"},
        "aeo_metrics.workers.tasks.alert_tasks.*": {"queue": "alerts"},
        "aeo_metrics.workers.tasks.content_tasks.*": {"queue": "content"},
    },
)
