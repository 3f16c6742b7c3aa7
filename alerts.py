"""
Alert notifier for the Security Console
Records high-risk alerts for the configured destination; nothing is delivered
"""
import logging

from config import AUDIT_EVENTS, DEFAULT_ALERT_EMAIL
from enums import Permission
from errors import ValidationError
from models import Alert
from risk_classifier import ActionKind, classify_risk

logger = logging.getLogger(__name__)


def format_banner(alert, pending_count=1):
    """Text banner for an active alert"""
    lines = [
        "!" * 70,
        "HIGH-RISK SECURITY ALERT",
        f"Suspicious action: \"{alert.event.action}\" by {alert.event.user}",
        f"Notification addressed to {alert.email}",
    ]
    if pending_count > 1:
        lines.append(f"{pending_count} events are awaiting authorization")
    lines.append("!" * 70)
    return "\n".join(lines)


class AlertNotifier:
    """
    Surfaces the most recent pending high-risk event as the active alert
    Dismissing hides the banner only; the event stays pending in the log
    """

    def __init__(self, security_log, alert_email=DEFAULT_ALERT_EMAIL):
        self.security_log = security_log
        self.alert_email = alert_email
        self.sent_alerts = []
        self._dismissed = set()
        security_log.subscribe(self.on_event)

    def on_event(self, event):
        """Log listener: record an alert for every new pending event"""
        if not event.is_pending:
            return

        alert = Alert(event=event, email=self.alert_email)
        self.sent_alerts.append(alert)
        logger.warning("High-risk alert for %s (%s by %s) addressed to %s",
                       event.id, event.action, event.user, self.alert_email)

    def current_alert(self):
        """Return the banner alert, or None when nothing is pending or it was dismissed"""
        event = self.security_log.get_pending_alert()
        if event is None or event.id in self._dismissed:
            return None
        return Alert(event=event, email=self.alert_email)

    def dismiss(self, event_id=None):
        """Hide the banner for an event (defaults to the current one)"""
        if event_id is None:
            alert = self.current_alert()
            if alert is None:
                return False
            event_id = alert.event.id

        self._dismissed.add(event_id)
        logger.info("Alert for %s dismissed", event_id)
        return True

    def pending_count(self):
        return len(self.security_log.get_security_events({'pending': True}))

    def set_alert_email(self, actor, email, permission_checker):
        """
        Change the alert destination
        Requires the anti-fraud settings permission; shape checks are the caller's
        """
        permission_checker.require_permission(actor, Permission.MANAGE_ANTI_FRAUD_SETTINGS)

        if not email or not email.strip():
            raise ValidationError("Alert email cannot be empty")

        previous = self.alert_email
        self.alert_email = email.strip()

        self.security_log.append(
            actor.email,
            AUDIT_EVENTS["ALERT_SETTINGS_CHANGE"],
            f"Alert email changed from {previous} to {self.alert_email}",
            classify_risk(ActionKind.ALERT_SETTINGS_CHANGE),
        )
        return self.alert_email
