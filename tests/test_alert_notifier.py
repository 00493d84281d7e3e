"""Tests for civiclens.services.alert_notifier: smtplib is mocked."""

import smtplib
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from civiclens.models.alert import AlertRequest
from civiclens.models.analysis import Severity
from civiclens.services.alert_notifier import (
    AlertNotifier,
    NotifierNotConfiguredError,
    render_alert_html,
    render_alert_subject,
)


def make_alert(**overrides):
    fields = dict(
        location="MG Road, Bengaluru",
        issue_type="Open Manhole",
        severity=Severity.HIGH,
        image_reference="https://cdn.example.com/evidence.jpg",
        timestamp=datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return AlertRequest(**fields)


def make_notifier(**overrides):
    fields = dict(
        host="smtp.test",
        port=587,
        username="bot",
        password="secret",
        use_tls=True,
        sender="alerts@civiclens.app",
        recipient="admin@city.gov",
        min_severity="High",
    )
    fields.update(overrides)
    return AlertNotifier(**fields)


class TestEligibility:
    def test_high_severity_is_eligible(self):
        eligible, _ = make_notifier().is_eligible(make_alert())
        assert eligible is True

    def test_below_threshold_is_rejected(self):
        eligible, reason = make_notifier().is_eligible(make_alert(severity=Severity.MEDIUM))
        assert eligible is False
        assert "Medium" in reason

    def test_force_overrides_threshold(self):
        eligible, _ = make_notifier().is_eligible(make_alert(severity=Severity.LOW, force=True))
        assert eligible is True

    def test_lower_threshold(self):
        eligible, _ = make_notifier(min_severity="Medium").is_eligible(make_alert(severity=Severity.MEDIUM))
        assert eligible is True


class TestRendering:
    def test_subject(self):
        assert render_alert_subject(make_alert()) == "⚠️ New Civic Issue at MG Road, Bengaluru"

    def test_html_escapes_values(self):
        body = render_alert_html(make_alert(location="<script>alert(1)</script>"), dashboard_url="https://dash")
        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "#dc2626" in body
        assert 'href="https://dash"' in body

    def test_message_headers(self):
        message = make_notifier().build_message(make_alert())
        assert message["To"] == "admin@city.gov"
        assert message["From"] == "alerts@civiclens.app"
        assert message["Message-ID"]


class TestSend:
    def test_sends_over_smtp(self):
        with patch("civiclens.services.alert_notifier.smtplib.SMTP") as smtp_cls:
            message_id = make_notifier().send(make_alert())

        smtp_cls.assert_called_once_with("smtp.test", 587, timeout=10)
        smtp = smtp_cls.return_value.__enter__.return_value
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("bot", "secret")
        sent = smtp.send_message.call_args[0][0]
        assert sent["Message-ID"] == message_id

    def test_not_configured(self):
        with pytest.raises(NotifierNotConfiguredError):
            make_notifier(host="").send(make_alert())

    def test_smtp_errors_propagate(self):
        with patch("civiclens.services.alert_notifier.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value.send_message.side_effect = (
                smtplib.SMTPRecipientsRefused({})
            )
            with pytest.raises(smtplib.SMTPException):
                make_notifier().send(make_alert())
