"""Tests for alert rules and the alert service."""

import uuid
from datetime import date
from typing import List, Optional

import pytest
from sqlalchemy.orm import Session

from aeo_metrics.models import (
    AlertSeverity,
    AlertType,
    Notification,
    NotificationSettings,
    VisibilitySnapshot,
)
from aeo_metrics.services.alert_service import AlertEvaluator, AlertService, AlertToggles


def snapshot(
    overall: int = 50,
    mentions: int = 3,
    positive: float = 50.0,
    negative: float = 10.0,
    competitors: Optional[dict] = None,
    **kwargs,
) -> VisibilitySnapshot:
    return VisibilitySnapshot(
        overall_score=overall,
        total_mentions=mentions,
        sentiment_positive=positive,
        sentiment_neutral=100.0 - positive - negative,
        sentiment_negative=negative,
        competitor_data=competitors if competitors is not None else {},
        **kwargs,
    )


@pytest.fixture
def evaluator() -> AlertEvaluator:
    return AlertEvaluator(drop_threshold_percent=10, sentiment_shift_points=5)


class TestVisibilityDrop:
    """Tests for the visibility drop rule."""

    def test_large_drop(self, evaluator: AlertEvaluator) -> None:
        """A drop over 10% triggers with the percentage in the message."""
        check = evaluator.check_visibility_drop(snapshot(overall=65), snapshot(overall=80))
        assert check.triggered is True
        assert check.message == "Visibility dropped 18.8% from 80 to 65"

    def test_small_drop(self, evaluator: AlertEvaluator) -> None:
        """A drop of 10% or less does not trigger."""
        assert evaluator.check_visibility_drop(snapshot(overall=75), snapshot(overall=80)).triggered is False
        assert evaluator.check_visibility_drop(snapshot(overall=73), snapshot(overall=80)).triggered is False

    def test_drop_to_zero(self, evaluator: AlertEvaluator) -> None:
        """Falling to zero is a 100% drop."""
        check = evaluator.check_visibility_drop(snapshot(overall=0), snapshot(overall=40))
        assert check.triggered is True
        assert check.message == "Visibility dropped 100.0% from 40 to 0"

    def test_previous_zero(self, evaluator: AlertEvaluator) -> None:
        """Nothing to drop from when the previous score was zero."""
        assert evaluator.check_visibility_drop(snapshot(overall=0), snapshot(overall=0)).triggered is False

    def test_increase(self, evaluator: AlertEvaluator) -> None:
        """Improvement never triggers."""
        assert evaluator.check_visibility_drop(snapshot(overall=90), snapshot(overall=50)).triggered is False


class TestNewMentions:
    """Tests for the new mentions rule."""

    def test_more_mentions(self, evaluator: AlertEvaluator) -> None:
        """More mentions than before triggers."""
        check = evaluator.check_new_mentions(snapshot(mentions=5), snapshot(mentions=3))
        assert check.triggered is True
        assert check.message == "New mentions detected: 5 (previously 3)"

    def test_same_mentions(self, evaluator: AlertEvaluator) -> None:
        """Equal counts do not trigger."""
        assert evaluator.check_new_mentions(snapshot(mentions=5), snapshot(mentions=5)).triggered is False


class TestSentimentShift:
    """Tests for the sentiment shift rule."""

    def test_shift_at_threshold(self, evaluator: AlertEvaluator) -> None:
        """A change of exactly 5 points triggers."""
        check = evaluator.check_sentiment_shift(snapshot(positive=55.0), snapshot(positive=50.0))
        assert check.triggered is True
        assert check.message == "Sentiment shift detected: positive +5.0%, negative 0.0%"

    def test_negative_shift(self, evaluator: AlertEvaluator) -> None:
        """A rise in negative share alone triggers."""
        check = evaluator.check_sentiment_shift(
            snapshot(positive=48.0, negative=20.0), snapshot(positive=50.0, negative=10.0)
        )
        assert check.triggered is True
        assert check.message == "Sentiment shift detected: positive -2.0%, negative +10.0%"

    def test_small_shift(self, evaluator: AlertEvaluator) -> None:
        """Changes under 5 points do not trigger."""
        check = evaluator.check_sentiment_shift(
            snapshot(positive=53.0, negative=12.0), snapshot(positive=50.0, negative=10.0)
        )
        assert check.triggered is False


class TestNewCompetitors:
    """Tests for the new competitor rule."""

    def test_new_names(self, evaluator: AlertEvaluator) -> None:
        """Names absent from the previous snapshot are reported in order."""
        current = snapshot(competitors={"Globex": {}, "Initech": {}, "Hooli": {}})
        previous = snapshot(competitors={"Globex": {}})
        check = evaluator.check_new_competitors(current, previous)
        assert check.triggered is True
        assert check.message == "New competitor appearances detected: Initech, Hooli"

    def test_dropped_competitor(self, evaluator: AlertEvaluator) -> None:
        """Competitors disappearing is not an alert."""
        check = evaluator.check_new_competitors(
            snapshot(competitors={}), snapshot(competitors={"Globex": {}})
        )
        assert check.triggered is False


class TestEvaluate:
    """Tests for running all rules together."""

    def test_no_previous_snapshot(self, evaluator: AlertEvaluator) -> None:
        """Every rule is quiet without a previous snapshot."""
        current = snapshot(overall=0, mentions=10, competitors={"Globex": {}})
        for check in (
            evaluator.check_visibility_drop,
            evaluator.check_new_mentions,
            evaluator.check_sentiment_shift,
            evaluator.check_new_competitors,
        ):
            result = check(current, None)
            assert result.triggered is False
            assert result.message == "No previous snapshot"
        assert evaluator.evaluate(AlertToggles(), current, None) == []

    def test_all_rules(self, evaluator: AlertEvaluator) -> None:
        """Triggered events come back in rule order with titles and severities."""
        current = snapshot(overall=40, mentions=6, positive=30.0, competitors={"Globex": {}})
        previous = snapshot(overall=80, mentions=2, positive=50.0, competitors={})

        events = evaluator.evaluate(AlertToggles(), current, previous)

        assert [(e.type, e.title, e.severity) for e in events] == [
            (AlertType.VISIBILITY_DROP, "Visibility Drop Alert", AlertSeverity.WARNING),
            (AlertType.NEW_MENTION, "New Mentions Detected", AlertSeverity.INFO),
            (AlertType.SENTIMENT_SHIFT, "Sentiment Shift Detected", AlertSeverity.WARNING),
            (AlertType.COMPETITOR_NEW, "New Competitor Mentioned", AlertSeverity.INFO),
        ]

    def test_toggles_off(self, evaluator: AlertEvaluator) -> None:
        """Disabled rules are skipped."""
        current = snapshot(overall=40, mentions=6, positive=30.0, competitors={"Globex": {}})
        previous = snapshot(overall=80, mentions=2, positive=50.0, competitors={})
        toggles = AlertToggles(
            visibility_drop=False, new_mention=False, sentiment_shift=False, competitor_new=False
        )
        assert evaluator.evaluate(toggles, current, previous) == []


class FakeNotifier:
    """Records webhook sends instead of making HTTP calls."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[dict] = []

    def send(self, webhook_url, type, title, body, metadata=None) -> bool:
        self.sent.append({"url": webhook_url, "type": type, "title": title, "metadata": metadata})
        return self.succeed


class TestAlertService:
    """Tests for AlertService.check_alerts."""

    @pytest.fixture
    def brand(self, db_session: Session, brand_factory):
        brand = brand_factory()
        for day, overall in [(10, 20), (14, 80), (15, 65), (16, 10)]:
            db_session.add(snapshot(
                overall=overall, mentions=3, brand_id=brand.id, snapshot_date=date(2026, 1, day)
            ))
        db_session.commit()
        return brand

    def add_settings(self, db: Session, brand, **kwargs) -> NotificationSettings:
        settings = NotificationSettings(user_id=brand.user_id, **kwargs)
        db.add(settings)
        db.commit()
        return settings

    def test_previous_snapshot_is_latest_earlier_day(self, db_session: Session, brand) -> None:
        """The comparison baseline is the closest earlier snapshot."""
        service = AlertService(db_session, notifier=FakeNotifier())
        previous = service.get_previous_snapshot(brand.id, date(2026, 1, 15))
        assert previous.snapshot_date == date(2026, 1, 14)
        assert service.get_previous_snapshot(brand.id, date(2026, 1, 10)) is None

    def test_stores_notifications_and_sends_webhooks(self, db_session: Session, brand) -> None:
        """Triggered alerts are stored and delivered to the webhook."""
        self.add_settings(db_session, brand, webhook_url="https://hooks.example.com/x")
        notifier = FakeNotifier()
        service = AlertService(db_session, notifier=notifier, evaluator=AlertEvaluator(10, 5))

        summary = service.check_alerts(brand.id, date(2026, 1, 15))

        assert summary.success is True
        assert summary.alerts_created == 1
        assert summary.webhooks_sent == 1

        notifications = db_session.query(Notification).all()
        assert len(notifications) == 1
        note = notifications[0]
        assert note.type == "visibility_drop"
        assert note.title == "Visibility Drop Alert"
        assert note.body == "Visibility dropped 18.8% from 80 to 65"
        assert note.metadata_ == {
            "brand_id": str(brand.id),
            "brand_name": "Acme",
            "severity": "warning",
        }

        assert notifier.sent[0]["url"] == "https://hooks.example.com/x"
        assert notifier.sent[0]["metadata"] == {"brand_id": str(brand.id), "brand_name": "Acme"}

    def test_failed_webhook_keeps_notification(self, db_session: Session, brand) -> None:
        """Delivery failures do not undo stored notifications."""
        self.add_settings(db_session, brand, webhook_url="https://hooks.example.com/x")
        service = AlertService(db_session, notifier=FakeNotifier(succeed=False), evaluator=AlertEvaluator(10, 5))

        summary = service.check_alerts(brand.id, date(2026, 1, 15))

        assert summary.alerts_created == 1
        assert summary.webhooks_sent == 0
        assert db_session.query(Notification).count() == 1

    def test_no_webhook_url(self, db_session: Session, brand) -> None:
        """Without a webhook URL nothing is sent."""
        self.add_settings(db_session, brand)
        notifier = FakeNotifier()

        summary = AlertService(db_session, notifier=notifier, evaluator=AlertEvaluator(10, 5)).check_alerts(
            brand.id, date(2026, 1, 15)
        )

        assert summary.alerts_created == 1
        assert notifier.sent == []

    def test_disabled_alert_type(self, db_session: Session, brand) -> None:
        """A disabled alert type creates nothing."""
        self.add_settings(db_session, brand, alert_visibility_drop=False)

        summary = AlertService(db_session, notifier=FakeNotifier(), evaluator=AlertEvaluator(10, 5)).check_alerts(
            brand.id, date(2026, 1, 15)
        )

        assert summary.alerts_created == 0
        assert db_session.query(Notification).count() == 0

    def test_no_settings(self, db_session: Session, brand) -> None:
        """Users without notification settings get no alerts."""
        summary = AlertService(db_session, notifier=FakeNotifier()).check_alerts(brand.id, date(2026, 1, 15))
        assert summary.success is True
        assert summary.alerts_created == 0

    def test_no_snapshot(self, db_session: Session, brand) -> None:
        """A day without a snapshot is a no-op."""
        self.add_settings(db_session, brand)
        summary = AlertService(db_session, notifier=FakeNotifier()).check_alerts(brand.id, date(2026, 2, 1))
        assert summary.alerts_created == 0

    def test_unknown_brand(self, db_session: Session) -> None:
        """Unknown brands are an error."""
        with pytest.raises(ValueError):
            AlertService(db_session, notifier=FakeNotifier()).check_alerts(uuid.uuid4(), date(2026, 1, 15))
