import pytest

from config import ROLE_PERMISSIONS
from enums import Permission, RiskLevel, Role
from errors import ValidationError


class TestRolePermissionMap:
    def test_defaults_are_seeded(self, context):
        for role, permissions in ROLE_PERMISSIONS.items():
            assert context.role_manager.get_role_permissions(role) == set(permissions)

    def test_admin_holds_every_permission(self, context):
        assert context.role_manager.get_role_permissions('network_admin') == set(Permission)

    def test_grant_then_revoke_restores_prior_set(self, context):
        role_manager = context.role_manager
        before = role_manager.get_role_permissions(Role.COLLABORATOR)

        assert role_manager.grant_permission(Role.COLLABORATOR, Permission.VIEW_FINANCE)
        assert Permission.VIEW_FINANCE in role_manager.get_role_permissions(Role.COLLABORATOR)

        assert role_manager.revoke_permission(Role.COLLABORATOR, Permission.VIEW_FINANCE)
        assert role_manager.get_role_permissions(Role.COLLABORATOR) == before

    def test_grant_is_idempotent(self, context):
        role_manager = context.role_manager

        assert role_manager.grant_permission(Role.AUDITOR, Permission.GENERATE_REPORTS)
        assert not role_manager.grant_permission(Role.AUDITOR, Permission.GENERATE_REPORTS)
        assert len(role_manager.get_role_permissions(Role.AUDITOR)) == \
            len(ROLE_PERMISSIONS[Role.AUDITOR]) + 1

    def test_revoke_missing_permission_is_noop(self, context):
        before = context.role_manager.get_role_permissions(Role.AUDITOR)

        assert not context.role_manager.revoke_permission(Role.AUDITOR, Permission.MANAGE_USERS)
        assert context.role_manager.get_role_permissions(Role.AUDITOR) == before

    def test_mutations_are_isolated_per_role(self, context):
        before = context.role_manager.get_role_permissions(Role.MANAGER)

        context.role_manager.revoke_permission(Role.SUPERINTENDENT, Permission.VIEW_SECURITY)

        assert context.role_manager.get_role_permissions(Role.MANAGER) == before

    def test_role_can_be_emptied(self, context):
        for permission in ROLE_PERMISSIONS[Role.AUDITOR]:
            context.role_manager.revoke_permission(Role.AUDITOR, permission)

        assert context.role_manager.get_role_permissions(Role.AUDITOR) == set()

    def test_reset_to_defaults_discards_edits(self, context):
        context.role_manager.grant_permission(Role.AUDITOR, Permission.MANAGE_USERS)
        context.role_manager.revoke_permission(Role.MANAGER, Permission.VIEW_SECURITY)

        context.role_manager.reset_to_defaults()

        assert context.role_manager.get_permission_matrix() == {
            role: set(permissions) for role, permissions in ROLE_PERMISSIONS.items()}

    def test_get_all_roles_includes_descriptions(self, context):
        roles = {info['name']: info for info in context.role_manager.get_all_roles()}

        assert set(roles) == {role.value for role in Role}
        assert 'view_security' in roles['auditor']['permissions']
        assert roles['auditor']['description'].startswith('Auditor')


class TestPermissionAuditing:
    def test_granting_manage_permissions_logs_high_risk_event(self, context, admin):
        context.role_manager.grant_permission(
            Role.COLLABORATOR, Permission.MANAGE_PERMISSIONS, actor=admin.email)

        events = context.security_log.get_security_events()
        assert len(events) == 1
        event = events[0]
        assert event.action == "Potential privilege escalation"
        assert event.risk_level is RiskLevel.HIGH
        assert event.user == admin.email
        assert "collaborator" in event.details
        assert "manage_permissions" in event.details
        assert event.is_pending

    @pytest.mark.parametrize("actor", ["", "   ", None])
    def test_blank_actor_grants_nothing(self, context, actor):
        with pytest.raises(ValidationError):
            context.role_manager.grant_permission(
                Role.COLLABORATOR, Permission.MANAGE_PERMISSIONS, actor=actor)

        assert Permission.MANAGE_PERMISSIONS not in \
            context.role_manager.get_role_permissions(Role.COLLABORATOR)
        assert context.security_log.count() == 0

    def test_failed_escalation_event_rolls_back_grant(self, context, admin, monkeypatch):
        def failing_append(*args, **kwargs):
            raise RuntimeError("event store unavailable")

        monkeypatch.setattr(context.security_log, 'append', failing_append)

        with pytest.raises(RuntimeError):
            context.role_manager.grant_permission(
                Role.COLLABORATOR, Permission.MANAGE_PERMISSIONS, actor=admin.email)

        assert Permission.MANAGE_PERMISSIONS not in \
            context.role_manager.get_role_permissions(Role.COLLABORATOR)

        monkeypatch.undo()
        assert context.role_manager.grant_permission(
            Role.COLLABORATOR, Permission.MANAGE_PERMISSIONS, actor=admin.email)
        assert context.security_log.count() == 1

    def test_failed_grant_keeps_earlier_grants(self, context, admin, monkeypatch):
        context.role_manager.grant_permission(Role.AUDITOR, Permission.GENERATE_REPORTS)

        def failing_append(*args, **kwargs):
            raise RuntimeError("event store unavailable")

        monkeypatch.setattr(context.security_log, 'append', failing_append)
        with pytest.raises(RuntimeError):
            context.role_manager.grant_permission(
                Role.AUDITOR, Permission.MANAGE_PERMISSIONS, actor=admin.email)

        held = context.role_manager.get_role_permissions(Role.AUDITOR)
        assert Permission.GENERATE_REPORTS in held
        assert Permission.MANAGE_PERMISSIONS not in held

    def test_regranting_held_manage_permissions_logs_nothing(self, context):
        context.role_manager.grant_permission(Role.NETWORK_ADMIN, Permission.MANAGE_PERMISSIONS)

        assert context.security_log.count() == 0

    def test_plain_grant_and_revoke_are_not_logged(self, context):
        context.role_manager.grant_permission(Role.AUDITOR, Permission.GENERATE_REPORTS)
        context.role_manager.revoke_permission(Role.AUDITOR, Permission.GENERATE_REPORTS)

        assert context.security_log.count() == 0

    def test_save_logs_medium_event(self, context, admin):
        event = context.role_manager.save_permissions(admin.email)

        assert event.action == "Permission matrix changed"
        assert event.risk_level is RiskLevel.MEDIUM
        assert "network_admin=16" in event.details
        assert context.security_log.get_security_events()[0].id == event.id
