"""
Audit system for the Security Console
Security event log with risk levels and the one-time authorization record
"""
import logging
import uuid
from datetime import datetime, timedelta

from enums import RiskLevel
from errors import AlreadyAuthorizedError, NotFoundError, ValidationError
from models import AuthorizationInfo, SecurityEvent

logger = logging.getLogger(__name__)


def parse_risk_level(value):
    """Resolve a RiskLevel from a member, its value or its name"""
    if isinstance(value, RiskLevel):
        return value
    if isinstance(value, str):
        for level in RiskLevel:
            if value.strip().lower() in (level.value.lower(), level.name.lower()):
                return level
    raise ValidationError(f"Unknown risk level: {value!r}")


class SecurityLog:
    """
    Newest-first security event log
    Entries are never removed or reordered; authorization is attached once
    """

    def __init__(self, db, clock=None):
        self.db = db
        self.clock = clock or datetime.now
        self._last_timestamp = None
        self._listeners = []

    def subscribe(self, listener):
        """Register a callable invoked with every appended event"""
        self._listeners.append(listener)

    def _next_timestamp(self):
        # Wall clock, never earlier than the previous append
        now = self.clock()
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    def append(self, user, action, details="", risk_level=RiskLevel.LOW):
        """
        Log security event to the audit table
        Returns the stored event including its generated id and timestamp
        """
        risk_level = parse_risk_level(risk_level)
        if not user or not str(user).strip():
            raise ValidationError("Security events require the acting user")
        if not action or not action.strip():
            raise ValidationError("Security events require an action label")

        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()

            event_id = f"evt-{uuid.uuid4().hex[:12]}"
            timestamp = self._next_timestamp()

            cursor.execute("""
                INSERT INTO security_events (id, timestamp, user, action, details, risk_level)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (event_id, timestamp.isoformat(), user, action, details or "", risk_level.value))
            conn.commit()

        event = SecurityEvent(
            id=event_id,
            timestamp=timestamp,
            user=user,
            action=action,
            details=details or "",
            risk_level=risk_level,
        )

        if risk_level is RiskLevel.HIGH:
            logger.warning("High-risk event %s logged: %s by %s", event_id, action, user)
        else:
            logger.info("Security event %s logged: %s by %s (%s)",
                        event_id, action, user, risk_level.value)

        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Security event listener failed for %s", event_id)

        return event

    def authorize(self, event_id, authorizing_user, justification):
        """
        Attach authorization info to a pending high-risk event
        Refuses blank justifications, unknown ids and repeated authorization
        """
        if not justification or not justification.strip():
            raise ValidationError("A justification is required to authorize an event")
        if not authorizing_user or not authorizing_user.strip():
            raise ValidationError("The authorizing user is required")

        with self.db.lock:
            event = self.get_event(event_id)

            if not event.requires_authorization:
                raise ValidationError(
                    f"Event {event_id} is {event.risk_level.value} risk and needs no authorization")

            if event.is_authorized:
                logger.warning("Repeated authorization attempt on %s by %s",
                               event_id, authorizing_user)
                raise AlreadyAuthorizedError(
                    f"Event {event_id} was already authorized by "
                    f"{event.authorization_info.authorized_by}")

            authorized_at = max(self.clock(), event.timestamp)

            conn = self.db.get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                UPDATE security_events
                SET authorized_by = ?, authorized_at = ?, justification = ?
                WHERE id = ? AND authorized_by IS NULL
            """, (authorizing_user, authorized_at.isoformat(), justification.strip(), event_id))

            if cursor.rowcount != 1:
                conn.rollback()
                raise AlreadyAuthorizedError(f"Event {event_id} was already authorized")

            conn.commit()

        logger.info("Event %s authorized by %s", event_id, authorizing_user)
        return self.get_event(event_id)

    def get_event(self, event_id):
        """Return one event or raise NotFoundError"""
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT * FROM security_events WHERE id = ?", (event_id,))
        row = cursor.fetchone()

        if not row:
            raise NotFoundError(f"Security event '{event_id}' not found")

        return self._row_to_event(row)

    def get_security_events(self, filters=None, limit=None):
        """
        Retrieve events newest first with optional filtering
        Filters: risk_level, pending, authorized, user, action (substring)
        """
        if filters is None:
            filters = {}

        query = "SELECT * FROM security_events WHERE 1=1"
        params = []

        # Apply filters
        if filters.get('risk_level') is not None:
            query += " AND risk_level = ?"
            params.append(parse_risk_level(filters['risk_level']).value)

        if filters.get('pending') is not None:
            if filters['pending']:
                query += " AND risk_level = ? AND authorized_by IS NULL"
            else:
                query += " AND NOT (risk_level = ? AND authorized_by IS NULL)"
            params.append(RiskLevel.HIGH.value)

        if filters.get('authorized') is not None:
            if filters['authorized']:
                query += " AND authorized_by IS NOT NULL"
            else:
                query += " AND authorized_by IS NULL"

        if filters.get('user'):
            query += " AND user = ?"
            params.append(filters['user'])

        if filters.get('action'):
            query += " AND action LIKE ?"
            params.append(f"%{filters['action']}%")

        # Newest first; seq breaks timestamp ties by reverse insertion
        query += " ORDER BY seq DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor = self.db.get_connection().cursor()
        cursor.execute(query, params)
        return [self._row_to_event(row) for row in cursor.fetchall()]

    def get_pending_alert(self):
        """Return the most recent high-risk event still awaiting authorization"""
        events = self.get_security_events({'pending': True}, limit=1)
        return events[0] if events else None

    def count(self):
        cursor = self.db.get_connection().cursor()
        cursor.execute("SELECT COUNT(*) FROM security_events")
        return cursor.fetchone()[0]

    def get_audit_statistics(self):
        """
        Get statistics about security events
        Returns dictionary with totals, risk breakdown and recent activity
        """
        cursor = self.db.get_connection().cursor()

        total_events = self.count()

        # Events by risk level
        by_risk = {level: 0 for level in RiskLevel}
        cursor.execute("""
            SELECT risk_level, COUNT(*) as count
            FROM security_events
            GROUP BY risk_level
        """)
        for row in cursor.fetchall():
            by_risk[parse_risk_level(row['risk_level'])] = row['count']

        # Authorization status
        cursor.execute("""
            SELECT COUNT(*) FROM security_events
            WHERE risk_level = ? AND authorized_by IS NULL
        """, (RiskLevel.HIGH.value,))
        pending = cursor.fetchone()[0]

        cursor.execute("SELECT COUNT(*) FROM security_events WHERE authorized_by IS NOT NULL")
        authorized = cursor.fetchone()[0]

        # Events by action
        cursor.execute("""
            SELECT action, COUNT(*) as count
            FROM security_events
            GROUP BY action
            ORDER BY count DESC, action ASC
        """)
        events_by_action = [(row['action'], row['count']) for row in cursor.fetchall()]

        # Recent activity
        since = (self.clock() - timedelta(days=1)).isoformat()
        cursor.execute("SELECT COUNT(*) FROM security_events WHERE timestamp > ?", (since,))
        last_24h = cursor.fetchone()[0]

        return {
            'total_events': total_events,
            'by_risk_level': by_risk,
            'pending_authorization': pending,
            'authorized_events': authorized,
            'events_by_action': events_by_action,
            'last_24h_activity': last_24h,
        }

    def _row_to_event(self, row):
        authorization_info = None
        if row['authorized_by'] is not None:
            authorization_info = AuthorizationInfo(
                authorized_by=row['authorized_by'],
                timestamp=datetime.fromisoformat(row['authorized_at']),
                justification=row['justification'],
            )

        return SecurityEvent(
            id=row['id'],
            timestamp=datetime.fromisoformat(row['timestamp']),
            user=row['user'],
            action=row['action'],
            details=row['details'] or "",
            risk_level=parse_risk_level(row['risk_level']),
            authorization_info=authorization_info,
        )
