"""
Name: Password Maintenance Tests

Responsibilities:
  - Validate renew_all_passwords counts and derived credentials
  - Validate bulk_password_reset counts, revocation and notification
"""

import pytest
from conftest import FakeResetNotifier, USERS_TABLE, user_row

from journal_auth.application.auth_results import AuthErrorCode, AuthStatus
from journal_auth.container import build_components
from journal_auth.crosscutting.exceptions import StorageError
from journal_auth.infrastructure.row_store import InMemoryRowStore

pytestmark = pytest.mark.unit


def test_renew_restores_derived_passwords(components):
    result = components.maintenance.renew_all_passwords()

    assert result.status is AuthStatus.SUCCESS
    assert result.data == {"processed": 4, "errors": 0, "total": 4}
    login = components.auth_service.login("E001", "e001E001")
    assert login.status is AuthStatus.SUCCESS
    assert components.auth_service.login("E001", "correctpw").code is (
        AuthErrorCode.INVALID_CREDENTIALS
    )


def test_renew_clears_rotation_flags(settings, notifier):
    rows = InMemoryRowStore(
        seed={
            USERS_TABLE: [
                user_row("E005", "five@co.com", password="x",
                         require_password_change=True, is_temporary_password=True)
            ]
        }
    )
    components = build_components(settings, rows, notifier=notifier)

    components.maintenance.renew_all_passwords()

    row = rows.scan(USERS_TABLE)[0]
    assert row["require_password_change"] is False
    assert row["is_temporary_password"] is False


def test_renew_skips_rows_without_email(settings, notifier):
    rows = InMemoryRowStore(
        seed={
            USERS_TABLE: [
                user_row("E001", "e001@co.com", password="x"),
                user_row("E002", "", password="x"),
            ]
        }
    )
    result = build_components(settings, rows, notifier=notifier).maintenance.renew_all_passwords()

    assert result.status is AuthStatus.WARNING
    assert result.data["processed"] == 1
    assert result.data["errors"] == 1


def test_renew_with_nothing_processable_fails(settings, notifier):
    rows = InMemoryRowStore(seed={USERS_TABLE: [user_row("E002", "", password="x")]})
    result = build_components(settings, rows, notifier=notifier).maintenance.renew_all_passwords()

    assert result.status is AuthStatus.ERROR


def test_renew_on_empty_table_succeeds_with_zero(settings, notifier):
    result = build_components(
        settings, InMemoryRowStore(), notifier=notifier
    ).maintenance.renew_all_passwords()

    assert result.status is AuthStatus.SUCCESS
    assert result.data["total"] == 0


def test_bulk_reset_targets_active_users(components, notifier):
    live = components.auth_service.login("E001", "correctpw").token

    result = components.maintenance.bulk_password_reset()

    assert result.status is AuthStatus.SUCCESS
    assert result.data["reset"] == 3
    assert result.data["notified"] == 3
    assert sorted(u.employee_id for u in notifier.sent) == ["A001", "E001", "E002"]
    assert not components.tokens.verify(live)
    assert components.auth_service.login("E002", "Init4321").status is (
        AuthStatus.PASSWORD_CHANGE_REQUIRED
    )


def test_bulk_reset_notification_failures_are_warnings(settings, rows):
    components = build_components(settings, rows, notifier=FakeResetNotifier(fail=True))

    result = components.maintenance.bulk_password_reset()

    assert result.status is AuthStatus.WARNING
    assert result.data["reset"] == 3
    assert result.data["notification_failures"] == 3


def test_storage_failure_reading_users(settings, notifier):
    class BrokenRows(InMemoryRowStore):
        def scan(self, table):
            raise StorageError("db down")

    maintenance = build_components(settings, BrokenRows(), notifier=notifier).maintenance

    assert maintenance.renew_all_passwords().code is AuthErrorCode.STORAGE_ERROR
    assert maintenance.bulk_password_reset().code is AuthErrorCode.STORAGE_ERROR
