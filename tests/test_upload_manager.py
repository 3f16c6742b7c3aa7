import pytest

from enums import RiskLevel
from errors import PermissionDenied, ValidationError
from upload_manager import document_type_for


class TestInvoiceUploads:
    def test_small_invoice_is_low_risk(self, context, superintendent):
        upload, event = context.upload_manager.upload_invoice(
            superintendent, "fatura_abril.pdf", 1500)

        assert upload.kind == 'invoice'
        assert upload.amount == 1500
        assert upload.event_id == event.id
        assert upload.uploaded_at == event.timestamp
        assert event.risk_level is RiskLevel.LOW
        assert event.action == "Invoice upload"
        assert "amount=1500.00" in event.details

    def test_large_invoice_awaits_authorization(self, context, superintendent):
        _, event = context.upload_manager.upload_invoice(superintendent, "fatura.pdf", 30000)

        assert event.risk_level is RiskLevel.HIGH
        assert event.is_pending
        assert context.notifier.current_alert().event.id == event.id

    def test_threshold_is_exclusive(self, context, superintendent):
        _, event = context.upload_manager.upload_invoice(superintendent, "limit.pdf", 20000)

        assert event.risk_level is RiskLevel.LOW

    def test_context_threshold_is_used(self, clock, superintendent):
        from context import AppContext

        ctx = AppContext(clock=clock, anomaly_threshold=100)
        try:
            user = ctx.user_manager.get_user(superintendent.id)
            _, event = ctx.upload_manager.upload_invoice(user, "small.pdf", 150)
        finally:
            ctx.close()

        assert event.risk_level is RiskLevel.HIGH

    def test_invoice_requires_amount(self, context, superintendent):
        with pytest.raises(ValidationError):
            context.upload_manager.upload_invoice(superintendent, "fatura.pdf", None)

    def test_negative_amount_rejected(self, context, superintendent):
        with pytest.raises(ValidationError):
            context.upload_manager.upload_invoice(superintendent, "fatura.pdf", -5)

        assert context.upload_manager.list_uploads() == []
        assert context.security_log.count() == 0

    @pytest.mark.parametrize("amount", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_amount_rejected(self, context, superintendent, amount):
        with pytest.raises(ValidationError):
            context.upload_manager.upload_invoice(superintendent, "fatura.pdf", amount)

        assert context.upload_manager.list_uploads() == []
        assert context.security_log.count() == 0

    def test_auditor_cannot_upload_invoice(self, context, auditor):
        with pytest.raises(PermissionDenied):
            context.upload_manager.upload_invoice(auditor, "fatura.pdf", 10)


class TestDocumentUploads:
    def test_document_without_amount(self, context, unlocked_collaborator):
        upload, event = context.upload_manager.upload_document(
            unlocked_collaborator, "contrato_obra.pdf")

        assert upload.amount is None
        assert event.risk_level is RiskLevel.LOW
        assert "Contract" in event.details

    def test_document_with_large_amount_is_high(self, context, unlocked_collaborator):
        _, event = context.upload_manager.upload_document(
            unlocked_collaborator, "proposta.pdf", 45000.5)

        assert event.risk_level is RiskLevel.HIGH

    def test_document_with_nan_amount_rejected(self, context, admin):
        with pytest.raises(ValidationError):
            context.upload_manager.upload_document(admin, "proposta.pdf", float('nan'))

        assert context.upload_manager.list_uploads() == []

    def test_locked_collaborator_cannot_upload(self, context, collaborator):
        with pytest.raises(PermissionDenied):
            context.upload_manager.upload_document(collaborator, "recibo.pdf")

    def test_blank_file_name_rejected(self, context, admin):
        with pytest.raises(ValidationError):
            context.upload_manager.upload_document(admin, "   ")

    def test_list_uploads_newest_first(self, context, admin):
        first, _ = context.upload_manager.upload_document(admin, "a.pdf")
        second, _ = context.upload_manager.upload_invoice(admin, "b.pdf", 10)
        third, _ = context.upload_manager.upload_document(admin, "c.pdf")

        assert [u.id for u in context.upload_manager.list_uploads()] == \
            [third.id, second.id, first.id]
        assert [u.id for u in context.upload_manager.list_uploads('document')] == \
            [third.id, first.id]


class TestDocumentType:
    @pytest.mark.parametrize("file_name, expected", [
        ("Contrato_2024.pdf", "Contract"),
        ("recibo-abril.png", "Receipt"),
        ("Proposal v2.docx", "Proposal"),
        ("relatorio_final.pdf", "Report"),
        ("photo.jpg", "Other"),
    ])
    def test_document_type_for(self, file_name, expected):
        assert document_type_for(file_name) == expected
