"""
Alert Service
Compares a brand's daily snapshot with the previous one and raises notifications
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from aeo_metrics.config import get_settings
from aeo_metrics.models import (
    AlertSeverity,
    AlertType,
    Brand,
    Notification,
    NotificationSettings,
    VisibilitySnapshot,
)
from aeo_metrics.services.webhook_notifier import WebhookNotifier

logger = logging.getLogger(__name__)

NO_PREVIOUS = "No previous snapshot"


@dataclass
class AlertCheck:
    """Outcome of one alert rule"""
    triggered: bool
    message: str


@dataclass
class AlertEvent:
    """A triggered alert, ready to store and deliver"""
    type: AlertType
    title: str
    body: str
    severity: AlertSeverity
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AlertToggles:
    """Which alert types a user wants"""
    visibility_drop: bool = True
    new_mention: bool = True
    sentiment_shift: bool = True
    competitor_new: bool = True

    @classmethod
    def from_settings(cls, settings: NotificationSettings) -> "AlertToggles":
        return cls(
            visibility_drop=bool(settings.alert_visibility_drop),
            new_mention=bool(settings.alert_new_mention),
            sentiment_shift=bool(settings.alert_sentiment_shift),
            competitor_new=bool(settings.alert_competitor_new),
        )


@dataclass
class AlertCheckSummary:
    success: bool
    alerts_created: int = 0
    webhooks_sent: int = 0
    events: List[AlertEvent] = field(default_factory=list)


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.1f}"


class AlertEvaluator:
    """
    Pure alert rules over two snapshots.

    Every rule reports "not triggered" when there is no previous snapshot.
    """

    def __init__(
        self,
        drop_threshold_percent: Optional[float] = None,
        sentiment_shift_points: Optional[float] = None,
    ):
        settings = get_settings()
        self.drop_threshold_percent = (
            drop_threshold_percent
            if drop_threshold_percent is not None
            else settings.ALERT_VISIBILITY_DROP_PERCENT
        )
        self.sentiment_shift_points = (
            sentiment_shift_points
            if sentiment_shift_points is not None
            else settings.ALERT_SENTIMENT_SHIFT_POINTS
        )

    def check_visibility_drop(
        self, current: VisibilitySnapshot, previous: Optional[VisibilitySnapshot]
    ) -> AlertCheck:
        if previous is None:
            return AlertCheck(False, NO_PREVIOUS)

        previous_score = previous.overall_score or 0
        current_score = current.overall_score or 0
        if previous_score <= 0:
            return AlertCheck(False, "No previous score to compare")

        percent_drop = (previous_score - current_score) / previous_score * 100
        if percent_drop > self.drop_threshold_percent:
            return AlertCheck(
                True,
                f"Visibility dropped {percent_drop:.1f}% from {previous_score} to {current_score}",
            )
        return AlertCheck(False, "No significant drop")

    def check_new_mentions(
        self, current: VisibilitySnapshot, previous: Optional[VisibilitySnapshot]
    ) -> AlertCheck:
        if previous is None:
            return AlertCheck(False, NO_PREVIOUS)

        previous_mentions = previous.total_mentions or 0
        current_mentions = current.total_mentions or 0
        if current_mentions > previous_mentions:
            return AlertCheck(
                True,
                f"New mentions detected: {current_mentions} (previously {previous_mentions})",
            )
        return AlertCheck(False, "No new mentions")

    def check_sentiment_shift(
        self, current: VisibilitySnapshot, previous: Optional[VisibilitySnapshot]
    ) -> AlertCheck:
        if previous is None:
            return AlertCheck(False, NO_PREVIOUS)

        positive_change = float(current.sentiment_positive or 0) - float(previous.sentiment_positive or 0)
        negative_change = float(current.sentiment_negative or 0) - float(previous.sentiment_negative or 0)

        if (abs(positive_change) >= self.sentiment_shift_points
                or abs(negative_change) >= self.sentiment_shift_points):
            return AlertCheck(
                True,
                f"Sentiment shift detected: positive {_signed(positive_change)}%, "
                f"negative {_signed(negative_change)}%",
            )
        return AlertCheck(False, "No significant shift")

    def check_new_competitors(
        self, current: VisibilitySnapshot, previous: Optional[VisibilitySnapshot]
    ) -> AlertCheck:
        if previous is None:
            return AlertCheck(False, NO_PREVIOUS)

        previous_names = set((previous.competitor_data or {}).keys())
        new_names = [name for name in (current.competitor_data or {}) if name not in previous_names]
        if new_names:
            return AlertCheck(
                True,
                f"New competitor appearances detected: {', '.join(new_names)}",
            )
        return AlertCheck(False, "No new competitors")

    def evaluate(
        self,
        toggles: AlertToggles,
        current: VisibilitySnapshot,
        previous: Optional[VisibilitySnapshot],
    ) -> List[AlertEvent]:
        """Run every enabled rule and return the triggered events in rule order"""
        rules = [
            (toggles.visibility_drop, self.check_visibility_drop,
             AlertType.VISIBILITY_DROP, "Visibility Drop Alert", AlertSeverity.WARNING),
            (toggles.new_mention, self.check_new_mentions,
             AlertType.NEW_MENTION, "New Mentions Detected", AlertSeverity.INFO),
            (toggles.sentiment_shift, self.check_sentiment_shift,
             AlertType.SENTIMENT_SHIFT, "Sentiment Shift Detected", AlertSeverity.WARNING),
            (toggles.competitor_new, self.check_new_competitors,
             AlertType.COMPETITOR_NEW, "New Competitor Mentioned", AlertSeverity.INFO),
        ]

        events = []
        for enabled, check, alert_type, title, severity in rules:
            if not enabled:
                continue
            result = check(current, previous)
            if result.triggered:
                events.append(AlertEvent(
                    type=alert_type,
                    title=title,
                    body=result.message,
                    severity=severity,
                ))
        return events


class AlertService:
    """
    Loads snapshots and settings, evaluates alerts, stores notifications
    and delivers webhooks.

    Webhook failures never block notification storage. Repeated runs for
    the same day create repeated notifications.
    """

    def __init__(
        self,
        db: Session,
        notifier: Optional[WebhookNotifier] = None,
        evaluator: Optional[AlertEvaluator] = None,
    ):
        self.db = db
        self.notifier = notifier or WebhookNotifier()
        self.evaluator = evaluator or AlertEvaluator()

    def get_snapshot(self, brand_id: UUID, snapshot_date: date) -> Optional[VisibilitySnapshot]:
        return self.db.query(VisibilitySnapshot).filter(
            VisibilitySnapshot.brand_id == brand_id,
            VisibilitySnapshot.snapshot_date == snapshot_date,
        ).first()

    def get_previous_snapshot(self, brand_id: UUID, snapshot_date: date) -> Optional[VisibilitySnapshot]:
        """Most recent snapshot dated strictly before snapshot_date"""
        return (
            self.db.query(VisibilitySnapshot)
            .filter(
                VisibilitySnapshot.brand_id == brand_id,
                VisibilitySnapshot.snapshot_date < snapshot_date,
            )
            .order_by(VisibilitySnapshot.snapshot_date.desc())
            .first()
        )

    def check_alerts(self, brand_id: UUID, snapshot_date: Optional[date] = None) -> AlertCheckSummary:
        """
        Evaluate alerts for a brand's snapshot.

        Args:
            brand_id: Brand to check
            snapshot_date: Snapshot day, defaults to today (UTC)

        Returns:
            AlertCheckSummary with the events raised

        Raises:
            ValueError: If the brand does not exist
        """
        brand = self.db.get(Brand, brand_id)
        if brand is None:
            raise ValueError(f"Brand not found: {brand_id}")

        snapshot_date = snapshot_date or datetime.utcnow().date()
        current = self.get_snapshot(brand_id, snapshot_date)
        if current is None:
            logger.info(f"No snapshot found for brand {brand_id} on {snapshot_date}")
            return AlertCheckSummary(success=True)

        settings = self.db.query(NotificationSettings).filter(
            NotificationSettings.user_id == brand.user_id
        ).first()
        if settings is None:
            logger.info(f"No notification settings configured for brand {brand_id}")
            return AlertCheckSummary(success=True)

        previous = self.get_previous_snapshot(brand_id, snapshot_date)
        events = self.evaluator.evaluate(AlertToggles.from_settings(settings), current, previous)

        summary = AlertCheckSummary(success=True, events=events)
        for event in events:
            event.metadata = {
                "brand_id": str(brand_id),
                "brand_name": brand.name,
                "severity": event.severity.value,
            }
            self.db.add(Notification(
                user_id=brand.user_id,
                type=event.type.value,
                title=event.title,
                body=event.body,
                metadata_=event.metadata,
            ))
            summary.alerts_created += 1
        self.db.commit()

        if settings.webhook_url:
            for event in events:
                delivered = self.notifier.send(
                    settings.webhook_url,
                    type=event.type.value,
                    title=event.title,
                    body=event.body,
                    metadata={"brand_id": str(brand_id), "brand_name": brand.name},
                )
                if delivered:
                    summary.webhooks_sent += 1

        logger.info(
            f"Alert check for brand {brand_id} on {snapshot_date}: "
            f"{summary.alerts_created} alerts, {summary.webhooks_sent} webhooks"
        )
        return summary
