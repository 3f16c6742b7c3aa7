import pytest

from authorization import AuthorizationState, state_of
from enums import Permission, RiskLevel, Role
from errors import AlreadyAuthorizedError, NotFoundError, PermissionDenied, ValidationError


@pytest.fixture
def big_invoice(context, superintendent):
    _, event = context.upload_manager.upload_invoice(superintendent, "fatura_maio.pdf", 30000)
    return event


class TestAuthorizationState:
    def test_low_event_is_unflagged(self, context):
        event = context.security_log.append("a@x", "Login")

        assert state_of(event) is AuthorizationState.UNFLAGGED

    def test_high_event_moves_from_pending_to_authorized(self, context, admin, big_invoice):
        assert state_of(big_invoice) is AuthorizationState.PENDING_AUTHORIZATION

        authorized = context.workflow.authorize(admin, big_invoice.id, "Contract signed")

        assert state_of(authorized) is AuthorizationState.AUTHORIZED


class TestAuthorizationWorkflow:
    def test_high_value_invoice_authorized_by_admin(self, context, admin, big_invoice):
        assert big_invoice.risk_level is RiskLevel.HIGH
        assert big_invoice.authorization_info is None

        authorized = context.workflow.authorize(
            admin, big_invoice.id, "Approved quarterly contract")

        assert authorized.authorization_info.authorized_by == admin.email
        assert authorized.authorization_info.justification == "Approved quarterly contract"
        assert context.workflow.pending_events() == []

    def test_privilege_escalation_and_double_authorization(self, context, admin, superintendent):
        context.role_manager.grant_permission(
            Role.COLLABORATOR, Permission.MANAGE_PERMISSIONS, actor=admin.email)
        event = context.security_log.get_pending_alert()
        assert event.action == "Potential privilege escalation"

        first = context.workflow.authorize(superintendent, event.id, "Temporary delegation")

        with pytest.raises(AlreadyAuthorizedError):
            context.workflow.authorize(admin, event.id, "Again")

        stored = context.security_log.get_event(event.id)
        assert stored.authorization_info == first.authorization_info
        assert stored.authorization_info.authorized_by == superintendent.email

    def test_auditor_cannot_authorize(self, context, auditor, big_invoice):
        assert not context.workflow.can_authorize(auditor)

        with pytest.raises(PermissionDenied):
            context.workflow.authorize(auditor, big_invoice.id, "looks fine")

        assert context.security_log.get_event(big_invoice.id).is_pending

    def test_collaborator_cannot_authorize(self, context, unlocked_collaborator, big_invoice):
        with pytest.raises(PermissionDenied):
            context.workflow.authorize(unlocked_collaborator, big_invoice.id, "mine")

    def test_locked_manager_cannot_authorize(self, context, manager, big_invoice):
        assert not context.workflow.can_authorize(manager)

        with pytest.raises(PermissionDenied):
            context.workflow.authorize(manager, big_invoice.id, "ok")

    def test_unlocked_manager_can_authorize(self, context, unlocked_manager, big_invoice):
        authorized = context.workflow.authorize(unlocked_manager, big_invoice.id, "ok")

        assert authorized.authorization_info.authorized_by == unlocked_manager.email

    def test_permission_checked_before_validation(self, context, auditor):
        with pytest.raises(PermissionDenied):
            context.workflow.authorize(auditor, "evt-missing", "")

    def test_blank_justification(self, context, admin, big_invoice):
        with pytest.raises(ValidationError):
            context.workflow.authorize(admin, big_invoice.id, "  ")

    def test_unknown_event(self, context, admin):
        with pytest.raises(NotFoundError):
            context.workflow.authorize(admin, "evt-000000000000", "reason")

    def test_pending_events_newest_first(self, context, superintendent):
        _, first = context.upload_manager.upload_invoice(superintendent, "a.pdf", 21000)
        _, second = context.upload_manager.upload_invoice(superintendent, "b.pdf", 22000)

        assert [e.id for e in context.workflow.pending_events()] == [second.id, first.id]


class TestScenarios:
    def test_login_is_low_and_raises_no_alert(self, context):
        from auth import login_user
        from config import DEFAULT_PASSWORD

        user = login_user(context, "sandra.gomes@femar.org.br", DEFAULT_PASSWORD)

        head = context.security_log.get_security_events()[0]
        assert head.user == user.email
        assert head.risk_level is RiskLevel.LOW
        assert context.notifier.current_alert() is None

    def test_invoice_over_threshold_becomes_current_alert(self, context, superintendent):
        _, event = context.upload_manager.upload_invoice(superintendent, "nf.pdf", 25000)

        assert event.risk_level is RiskLevel.HIGH
        assert state_of(event) is AuthorizationState.PENDING_AUTHORIZATION
        assert context.notifier.current_alert().event.id == event.id

    def test_manager_authorizes_once(self, context, unlocked_manager, superintendent):
        _, event = context.upload_manager.upload_invoice(superintendent, "nf.pdf", 25000)

        authorized = context.workflow.authorize(unlocked_manager, event.id, "Approved")

        assert state_of(authorized) is AuthorizationState.AUTHORIZED
        assert authorized.authorization_info.authorized_by == unlocked_manager.email
        with pytest.raises(AlreadyAuthorizedError):
            context.workflow.authorize(unlocked_manager, event.id, "Approved again")
