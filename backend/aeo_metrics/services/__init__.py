"""
Services - scoring, aggregation and alerting on top of the adapters
"""

from .scoring_engine import calculate_visibility_score, calculate_general_visibility_score
from .result_processor import ResultProcessor, ProcessedResult
from .prompt_runner import PromptRunner, PromptRunSummary
from .snapshot_aggregator import SnapshotAggregator, AggregationResult, compute_snapshot_metrics
from .webhook_notifier import WebhookNotifier
from .alert_service import (
    AlertCheck,
    AlertEvent,
    AlertEvaluator,
    AlertService,
    AlertToggles,
    AlertCheckSummary,
)

__all__ = [
    "calculate_visibility_score",
    "calculate_general_visibility_score",
    "ResultProcessor",
    "ProcessedResult",
    "PromptRunner",
    "PromptRunSummary",
    "SnapshotAggregator",
    "AggregationResult",
    "compute_snapshot_metrics",
    "WebhookNotifier",
    "AlertCheck",
    "AlertEvent",
    "AlertEvaluator",
    "AlertService",
    "AlertToggles",
    "AlertCheckSummary",
]
