import pytest

import catalog
from config import PERMISSION_CATALOG
from enums import Permission, Role
from errors import ConfigurationError, ValidationError


class TestPermissionCatalog:
    def test_enumerate_all_lists_every_permission_once(self):
        entries = catalog.enumerate_all()

        assert [entry.id for entry in entries] == [entry.id for entry in PERMISSION_CATALOG]
        assert {entry.id for entry in entries} == set(Permission)
        assert len(entries) == len(Permission)

    def test_group_by_area_keeps_declaration_order(self):
        grouped = catalog.group_by_area()

        assert list(grouped) == ['General', 'Projects', 'Administrative',
                                 'Finance', 'System', 'Security']
        assert [entry.id for entry in grouped['Security']] == [
            Permission.VIEW_SECURITY, Permission.MANAGE_ANTI_FRAUD_SETTINGS]
        assert sum(len(entries) for entries in grouped.values()) == len(PERMISSION_CATALOG)

    def test_get_entry_accepts_identifier_string(self):
        entry = catalog.get_entry('manage_permissions')

        assert entry.id is Permission.MANAGE_PERMISSIONS
        assert entry.area == 'System'

    def test_validate_configuration_accepts_shipped_config(self):
        catalog.validate_configuration()

    def test_validate_configuration_rejects_duplicate_entry(self, monkeypatch):
        duplicated = PERMISSION_CATALOG + (PERMISSION_CATALOG[0],)
        monkeypatch.setattr(catalog, 'PERMISSION_CATALOG', duplicated)

        with pytest.raises(ConfigurationError):
            catalog.validate_configuration()


class TestIdentifierParsing:
    @pytest.mark.parametrize("value", [Role.AUDITOR, 'auditor', 'AUDITOR', ' auditor '])
    def test_parse_role(self, value):
        assert catalog.parse_role(value) is Role.AUDITOR

    def test_parse_permission_by_name(self):
        assert catalog.parse_permission('VIEW_SECURITY') is Permission.VIEW_SECURITY

    @pytest.mark.parametrize("value", ['root', '', None, 42])
    def test_unknown_role_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            catalog.parse_role(value)

        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_unknown_permission_is_rejected(self):
        with pytest.raises(ValidationError):
            catalog.parse_permission('launch_rockets')
