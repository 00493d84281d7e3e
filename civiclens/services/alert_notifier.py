"""
Alert Notifier - administrative e-mail alerts for detected civic issues.

DESIGN PRINCIPLES (CRITICAL):
- Alerts are EXPLICITLY triggered; analysis never sends mail by itself
- Alerts are GATED by a minimum severity (ALERT_MIN_SEVERITY) unless forced
- One fixed administrative recipient
- Transport errors propagate to the caller (no silent drop)
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional, Tuple

from civiclens.core.settings import settings
from civiclens.models.alert import AlertRequest
from civiclens.models.analysis import Severity

logger = logging.getLogger(__name__)


SEVERITY_COLORS = {
    Severity.HIGH: "#dc2626",
    Severity.MEDIUM: "#d97706",
}
DEFAULT_SEVERITY_COLOR = "#16a34a"


class NotifierNotConfiguredError(RuntimeError):
    """SMTP host is not configured."""


def render_alert_subject(alert: AlertRequest) -> str:
    return f"⚠️ New Civic Issue at {alert.location}"


def render_alert_html(alert: AlertRequest, dashboard_url: Optional[str] = None) -> str:
    """HTML body of the alert e-mail. All user-supplied values are escaped."""
    dashboard_url = dashboard_url or settings.DASHBOARD_URL
    color = SEVERITY_COLORS.get(alert.severity, DEFAULT_SEVERITY_COLOR)
    location = html.escape(alert.location)
    issue_type = html.escape(alert.issue_type)
    severity = html.escape(alert.severity.value)
    image = html.escape(alert.image_reference, quote=True)
    reported_at = alert.timestamp.strftime("%d %b %Y, %H:%M %Z").strip()

    return f"""
      <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; border: 1px solid #e2e8f0; border-radius: 8px; overflow: hidden;">
        <div style="background-color: #1e293b; padding: 20px; text-align: center;">
          <h1 style="color: white; margin: 0; font-size: 24px;">CivicLens Alert</h1>
        </div>
        <div style="padding: 24px;">
          <h2 style="color: #334155; margin-top: 0;">New Infrastructure Issue Detected</h2>
          <div style="background-color: #f8fafc; padding: 16px; border-radius: 6px; margin: 20px 0;">
            <p style="margin: 8px 0;"><strong>📍 Location:</strong> {location}</p>
            <p style="margin: 8px 0;"><strong>🚨 Severity:</strong> <span style="color: {color}; font-weight: bold;">{severity}</span></p>
            <p style="margin: 8px 0;"><strong>⚠️ Type:</strong> {issue_type}</p>
            <p style="margin: 8px 0;"><strong>🕒 Time:</strong> {html.escape(reported_at)}</p>
          </div>
          <p style="color: #64748b;">Snapshot Evidence:</p>
          <img src="{image}" alt="Issue Evidence" style="width: 100%; height: auto; border-radius: 4px; border: 1px solid #cbd5e1;" />
          <div style="margin-top: 30px; text-align: center;">
            <a href="{html.escape(dashboard_url, quote=True)}" style="background-color: #2563eb; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; font-weight: bold; display: inline-block;">View in Admin Dashboard</a>
          </div>
        </div>
        <div style="background-color: #f1f5f9; padding: 12px; text-align: center; color: #94a3b8; font-size: 12px;">
          Generated automatically by CivicLens AI Vision System
        </div>
      </div>
    """


class AlertNotifier:
    """
    Sends alert e-mails over SMTP.
    """

    STATUS_SENT = "SENT"
    STATUS_NOT_ELIGIBLE = "NOT_ELIGIBLE"

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        min_severity: Optional[str] = None,
    ):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username if username is not None else settings.SMTP_USERNAME
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls
        self.sender = sender or settings.ALERT_SENDER
        self.recipient = recipient or settings.ALERT_RECIPIENT
        self.min_severity = Severity(min_severity or settings.ALERT_MIN_SEVERITY)

    def is_configured(self) -> bool:
        return bool(self.host)

    def is_eligible(self, alert: AlertRequest) -> Tuple[bool, str]:
        """
        Check if an alert should be sent.

        Returns:
            Tuple of (is_eligible: bool, reason: str)
        """
        if alert.force:
            return True, "Alert forced by caller"
        if alert.severity.rank < self.min_severity.rank:
            return False, f"Severity is {alert.severity.value}, must be at least {self.min_severity.value}"
        return True, "Alert meets severity threshold"

    def build_message(self, alert: AlertRequest) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = render_alert_subject(alert)
        message["Message-ID"] = make_msgid(domain="civiclens.app")
        message.set_content(
            f"New civic issue at {alert.location}\n"
            f"Severity: {alert.severity.value}\n"
            f"Type: {alert.issue_type}\n"
            f"Time: {alert.timestamp.isoformat()}\n"
        )
        message.add_alternative(render_alert_html(alert), subtype="html")
        return message

    def send(self, alert: AlertRequest) -> str:
        """
        Send the alert and return its Message-ID.
        SMTP errors are logged and re-raised.
        """
        if not self.is_configured():
            raise NotifierNotConfiguredError("SMTP_HOST is not configured")

        message = self.build_message(alert)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Error sending alert email: {e}")
            raise

        message_id = message["Message-ID"]
        logger.info(f"✅ Alert email sent: {message_id}")
        return message_id


_notifier: Optional[AlertNotifier] = None


def get_alert_notifier() -> AlertNotifier:
    global _notifier
    if _notifier is None:
        _notifier = AlertNotifier()
    return _notifier
