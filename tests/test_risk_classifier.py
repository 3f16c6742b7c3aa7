import pytest

from config import ANOMALY_THRESHOLD
from enums import Permission, RiskLevel
from errors import ValidationError
from risk_classifier import RISK_RULES, ActionKind, classify_risk


class TestClassifyRisk:
    @pytest.mark.parametrize("kind", [ActionKind.INVOICE_UPLOAD, ActionKind.DOCUMENT_UPLOAD])
    def test_amount_above_threshold_is_high(self, kind):
        assert classify_risk(kind, ANOMALY_THRESHOLD + 0.01) is RiskLevel.HIGH

    @pytest.mark.parametrize("amount", [0, 1500, ANOMALY_THRESHOLD])
    def test_amount_at_or_below_threshold_is_low(self, amount):
        assert classify_risk(ActionKind.INVOICE_UPLOAD, amount) is RiskLevel.LOW

    def test_upload_without_amount_is_low(self):
        assert classify_risk(ActionKind.DOCUMENT_UPLOAD) is RiskLevel.LOW

    def test_custom_threshold(self):
        assert classify_risk(ActionKind.INVOICE_UPLOAD, 600, threshold=500) is RiskLevel.HIGH
        assert classify_risk(ActionKind.INVOICE_UPLOAD, 500, threshold=500) is RiskLevel.LOW

    def test_granting_permission_management_is_high(self):
        assert classify_risk(ActionKind.PERMISSION_GRANT,
                             Permission.MANAGE_PERMISSIONS) is RiskLevel.HIGH
        assert classify_risk('permission_grant', 'manage_permissions') is RiskLevel.HIGH

    def test_other_grants_are_medium(self):
        assert classify_risk(ActionKind.PERMISSION_GRANT,
                             Permission.VIEW_FINANCE) is RiskLevel.MEDIUM

    @pytest.mark.parametrize("kind", [
        ActionKind.USER_CREATE, ActionKind.USER_DELETE, ActionKind.PERMISSION_SAVE,
        ActionKind.REPORT_GENERATION, ActionKind.DATA_EXPORT, ActionKind.ALERT_SETTINGS_CHANGE,
    ])
    def test_administrative_and_reporting_are_medium(self, kind):
        assert classify_risk(kind) is RiskLevel.MEDIUM

    @pytest.mark.parametrize("kind", [ActionKind.LOGIN, ActionKind.PASSWORD_CHANGE])
    def test_routine_actions_are_low(self, kind):
        assert classify_risk(kind) is RiskLevel.LOW

    def test_classification_is_deterministic(self):
        results = {classify_risk(ActionKind.INVOICE_UPLOAD, 25000) for _ in range(10)}

        assert results == {RiskLevel.HIGH}

    @pytest.mark.parametrize("amount", ["30000", True, object()])
    def test_non_numeric_amount_rejected(self, amount):
        with pytest.raises(ValidationError):
            classify_risk(ActionKind.INVOICE_UPLOAD, amount)

    @pytest.mark.parametrize("amount", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_amount_rejected(self, amount):
        with pytest.raises(ValidationError, match="finite"):
            classify_risk(ActionKind.INVOICE_UPLOAD, amount)

    def test_unknown_action_kind_rejected(self):
        with pytest.raises(ValidationError):
            classify_risk('teleport')

    def test_every_action_kind_has_a_rule(self):
        covered = set()
        for _priority, kinds, _condition, _level in RISK_RULES:
            covered |= kinds

        assert covered == set(ActionKind)
