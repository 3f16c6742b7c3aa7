"""
Upload Manager for the Security Console
Records invoice and document uploads and logs them with their risk level
"""
import logging
from datetime import datetime

from config import ANOMALY_THRESHOLD, AUDIT_EVENTS
from enums import Permission
from errors import ValidationError
from models import Upload
from risk_classifier import ActionKind, classify_risk

logger = logging.getLogger(__name__)

# File-name keywords -> document type, first match wins
DOCUMENT_TYPES = (
    (('contract', 'contrato'), 'Contract'),
    (('receipt', 'recibo', 'invoice', 'fatura'), 'Receipt'),
    (('proposal', 'proposta'), 'Proposal'),
    (('report', 'relatorio'), 'Report'),
)


def document_type_for(file_name):
    """Guess a document type from its file name"""
    lower_name = file_name.lower()
    for keywords, document_type in DOCUMENT_TYPES:
        if any(keyword in lower_name for keyword in keywords):
            return document_type
    return 'Other'


class UploadManager:
    """
    Stores upload records; the monetary amount drives the risk level
    Amounts above the anomaly threshold await authorization
    """

    def __init__(self, db, security_log, permission_checker, anomaly_threshold=ANOMALY_THRESHOLD):
        self.db = db
        self.security_log = security_log
        self.permission_checker = permission_checker
        self.anomaly_threshold = anomaly_threshold

    def upload_invoice(self, actor, file_name, amount):
        """
        Record an uploaded invoice
        Returns (upload, event)
        """
        self.permission_checker.require_permission(actor, Permission.CREATE_INVOICES)
        if amount is None:
            raise ValidationError("Invoices require an amount")

        return self._record(actor, ActionKind.INVOICE_UPLOAD, 'invoice', file_name, amount)

    def upload_document(self, actor, file_name, amount=None):
        """
        Record an uploaded document, optionally carrying a monetary amount
        Returns (upload, event)
        """
        self.permission_checker.require_permission(actor, Permission.UPLOAD_DOCUMENTS)
        return self._record(actor, ActionKind.DOCUMENT_UPLOAD, 'document', file_name, amount)

    def _record(self, actor, action_kind, kind, file_name, amount):
        if not file_name or not file_name.strip():
            raise ValidationError("File name cannot be empty")
        file_name = file_name.strip()

        risk_level = classify_risk(action_kind, amount, self.anomaly_threshold)
        if amount is not None and amount < 0:
            raise ValidationError("Amount cannot be negative")

        if amount is None:
            details = f"{file_name} ({document_type_for(file_name)})"
        else:
            details = f"{file_name} amount={amount:.2f} threshold={self.anomaly_threshold:.2f}"

        label = AUDIT_EVENTS["INVOICE_UPLOAD" if kind == 'invoice' else "DOCUMENT_UPLOAD"]
        event = self.security_log.append(actor.email, label, details, risk_level)

        uploaded_at = event.timestamp
        with self.db.lock:
            conn = self.db.get_connection()
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO uploads (kind, file_name, amount, uploaded_by, uploaded_at, event_id)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (kind, file_name, amount, actor.email, uploaded_at.isoformat(), event.id))
            upload_id = cursor.lastrowid
            conn.commit()

        logger.info("%s %s uploaded by %s (%s risk)",
                    kind.title(), file_name, actor.email, risk_level.value)

        upload = Upload(
            id=upload_id,
            kind=kind,
            file_name=file_name,
            amount=amount,
            uploaded_by=actor.email,
            uploaded_at=uploaded_at,
            event_id=event.id,
        )
        return upload, event

    def list_uploads(self, kind=None):
        """List uploads newest first, optionally of one kind"""
        query = "SELECT * FROM uploads"
        params = []
        if kind:
            query += " WHERE kind = ?"
            params.append(kind)
        query += " ORDER BY id DESC"

        cursor = self.db.get_connection().cursor()
        cursor.execute(query, params)

        return [
            Upload(
                id=row['id'],
                kind=row['kind'],
                file_name=row['file_name'],
                amount=row['amount'],
                uploaded_by=row['uploaded_by'],
                uploaded_at=datetime.fromisoformat(row['uploaded_at']),
                event_id=row['event_id'],
            )
            for row in cursor.fetchall()
        ]
