"""
Snapshot Aggregator
Folds one day of prompt results into the brand's daily visibility snapshot
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from aeo_metrics.config import ENGINES
from aeo_metrics.models import Brand, PromptResult, SentimentLabel, VisibilitySnapshot
from aeo_metrics.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

SENTIMENT_LABELS = [label.value for label in SentimentLabel]

# Fields overwritten when the day's snapshot already exists
METRIC_FIELDS = [
    "overall_score",
    "chatgpt_score",
    "perplexity_score",
    "google_aio_score",
    "sentiment_positive",
    "sentiment_neutral",
    "sentiment_negative",
    "total_mentions",
    "total_prompts_checked",
    "competitor_data",
]


@dataclass
class AggregationResult:
    """Outcome of one aggregation run"""
    success: bool
    snapshot_created: bool
    snapshot_id: Optional[UUID] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


def compute_snapshot_metrics(results: List[PromptResult]) -> Dict[str, Any]:
    """
    Aggregate metrics for a non-empty list of results.

    Per-engine averages skip results without a score and are None when the
    engine has none. The overall average counts missing scores as 0.
    """
    total = len(results)

    engine_scores: Dict[str, List[int]] = {}
    for r in results:
        if r.visibility_score is not None:
            engine_scores.setdefault(r.engine, []).append(r.visibility_score)

    metrics: Dict[str, Any] = {}
    for engine in ENGINES:
        scores = engine_scores.get(engine)
        metrics[f"{engine}_score"] = round_half_up(sum(scores) / len(scores)) if scores else None

    metrics["overall_score"] = round_half_up(sum(r.visibility_score or 0 for r in results) / total)

    sentiment_counts = {label: 0 for label in SENTIMENT_LABELS}
    for r in results:
        if r.sentiment_label in sentiment_counts:
            sentiment_counts[r.sentiment_label] += 1
    for label in SENTIMENT_LABELS:
        metrics[f"sentiment_{label}"] = round(sentiment_counts[label] / total * 100, 2)

    metrics["total_mentions"] = sum(1 for r in results if r.brand_mentioned)
    metrics["total_prompts_checked"] = total

    competitor_data: Dict[str, Dict[str, Any]] = {}
    for r in results:
        for mention in r.competitor_mentions or []:
            name = mention.get("name")
            if not name:
                continue
            entry = competitor_data.setdefault(
                name, {"mentions": 0, "sentiment": {label: 0 for label in SENTIMENT_LABELS}}
            )
            entry["mentions"] += 1
            sentiment = mention.get("sentiment")
            if sentiment in entry["sentiment"]:
                entry["sentiment"][sentiment] += 1
    metrics["competitor_data"] = competitor_data

    return metrics


class SnapshotAggregator:
    """
    Builds daily visibility snapshots.

    Re-running for the same brand and day overwrites the existing row, so
    the snapshot always reflects every result stored so far that day.
    """

    def __init__(self, db: Session):
        self.db = db

    def _results_for_day(self, brand_id: UUID, snapshot_date: date) -> List[PromptResult]:
        day_start = datetime.combine(snapshot_date, time.min)
        day_end = day_start + timedelta(days=1)
        return self.db.query(PromptResult).filter(
            PromptResult.brand_id == brand_id,
            PromptResult.created_at >= day_start,
            PromptResult.created_at < day_end,
        ).all()

    def _find_snapshot(self, brand_id: UUID, snapshot_date: date) -> Optional[VisibilitySnapshot]:
        return self.db.query(VisibilitySnapshot).filter(
            VisibilitySnapshot.brand_id == brand_id,
            VisibilitySnapshot.snapshot_date == snapshot_date,
        ).first()

    def _upsert(self, brand_id: UUID, snapshot_date: date, metrics: Dict[str, Any]) -> None:
        """Insert or update the (brand, day) row in one statement where supported"""
        dialect = self.db.get_bind().dialect.name
        now = datetime.utcnow()

        if dialect in ("postgresql", "sqlite"):
            insert = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = insert(VisibilitySnapshot).values(
                brand_id=brand_id,
                snapshot_date=snapshot_date,
                updated_at=now,
                **metrics,
            )
            update_set = {name: stmt.excluded[name] for name in METRIC_FIELDS}
            update_set["updated_at"] = now
            stmt = stmt.on_conflict_do_update(
                index_elements=["brand_id", "snapshot_date"],
                set_=update_set,
            )
            self.db.execute(stmt)
            return

        snapshot = self._find_snapshot(brand_id, snapshot_date)
        if snapshot is None:
            snapshot = VisibilitySnapshot(brand_id=brand_id, snapshot_date=snapshot_date)
            self.db.add(snapshot)
        for name, value in metrics.items():
            setattr(snapshot, name, value)
        snapshot.updated_at = now

    def aggregate(self, brand_id: UUID, snapshot_date: Optional[date] = None) -> AggregationResult:
        """
        Aggregate a brand's results for one UTC day and upsert the snapshot.

        Args:
            brand_id: Brand to aggregate
            snapshot_date: Day to aggregate, defaults to today (UTC)

        Returns:
            AggregationResult; snapshot_created is False when the day had no results

        Raises:
            ValueError: If the brand does not exist
        """
        if self.db.get(Brand, brand_id) is None:
            raise ValueError(f"Brand not found: {brand_id}")

        snapshot_date = snapshot_date or datetime.utcnow().date()
        results = self._results_for_day(brand_id, snapshot_date)

        if not results:
            logger.info(f"No results found for aggregation: brand {brand_id} on {snapshot_date}")
            return AggregationResult(success=True, snapshot_created=False)

        metrics = compute_snapshot_metrics(results)
        existed = self._find_snapshot(brand_id, snapshot_date) is not None

        self._upsert(brand_id, snapshot_date, metrics)
        self.db.commit()

        snapshot = self._find_snapshot(brand_id, snapshot_date)
        if snapshot is not None:
            self.db.refresh(snapshot)

        logger.info(
            f"Snapshot {'updated' if existed else 'created'} for brand {brand_id} on {snapshot_date}: "
            f"overall={metrics['overall_score']} results={metrics['total_prompts_checked']}"
        )

        return AggregationResult(
            success=True,
            snapshot_created=not existed,
            snapshot_id=snapshot.id if snapshot else None,
            metrics=metrics,
        )
