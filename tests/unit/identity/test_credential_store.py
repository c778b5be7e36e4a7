"""
Name: Credential Store Tests

Responsibilities:
  - Validate identifier / employee id / email lookups over the row store
  - Validate flag normalization of sheet-style values
  - Validate set_password writes and errors
"""

import pytest
from conftest import USERS_TABLE, sha256_hex, user_row

from journal_auth.crosscutting.exceptions import UserNotFound
from journal_auth.domain.entities import UserStatus
from journal_auth.identity.credential_store import CredentialStore
from journal_auth.infrastructure.row_store import InMemoryRowStore

pytestmark = pytest.mark.unit


def _store(*rows: dict) -> tuple[CredentialStore, InMemoryRowStore]:
    backing = InMemoryRowStore(seed={USERS_TABLE: list(rows)})
    return CredentialStore(backing, table=USERS_TABLE), backing


def test_find_by_identifier_matches_employee_id_or_email():
    store, _ = _store(user_row("E001", "e001@co.com", password="pw"))

    assert store.find_by_identifier("E001").email == "e001@co.com"
    assert store.find_by_identifier("e001@co.com").employee_id == "E001"
    assert store.find_by_identifier("E404") is None
    assert store.find_by_identifier("") is None


def test_find_by_identifier_skips_inactive_users():
    store, _ = _store(user_row("E009", "gone@co.com", password="pw", status=0))
    assert store.find_by_identifier("E009") is None


def test_find_by_identifier_compares_numeric_ids_as_strings():
    store, _ = _store(user_row(1001, "n@co.com", password="pw"))
    assert store.find_by_identifier("1001").employee_id == "1001"


def test_duplicate_employee_id_first_match_wins():
    store, _ = _store(
        user_row("E001", "first@co.com", password="pw"),
        user_row("E001", "second@co.com", password="pw"),
    )
    assert store.find_by_identifier("E001").email == "first@co.com"
    assert store.find_by_employee_id("E001").email == "first@co.com"


def test_find_by_email_is_case_insensitive_and_ignores_status():
    store, _ = _store(user_row("E009", "Gone@Co.com", password="pw", status=0))
    user = store.find_by_email("gone@co.COM")
    assert user is not None
    assert user.status is UserStatus.INACTIVE


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(True, True), ("true", True), ("TRUE", True), (1, True), ("1", True),
     (False, False), ("false", False), ("", False), (None, False), (0, False)],
)
def test_flags_are_normalized(raw, expected):
    store, _ = _store(
        user_row("E001", "e@co.com", password="pw", require_password_change=raw)
    )
    assert store.find_by_employee_id("E001").require_password_change is expected


@pytest.mark.parametrize("raw", [1, "1", "active", True])
def test_active_status_values(raw):
    store, _ = _store(user_row("E001", "e@co.com", password="pw", status=raw))
    assert store.find_by_employee_id("E001").is_active


def test_unknown_role_is_preserved():
    store, _ = _store(user_row("E001", "e@co.com", password="pw", role="auditor"))
    assert store.find_by_employee_id("E001").role == "auditor"


def test_set_password_updates_hash_and_flags():
    store, backing = _store(user_row("E001", "e@co.com", password="old"))

    updated = store.set_password(
        "E001", sha256_hex("new"), require_change=True, is_temporary=True
    )

    assert updated.password_hash == sha256_hex("new")
    assert updated.require_password_change is True
    row = backing.scan(USERS_TABLE)[0]
    assert row["password_hash"] == sha256_hex("new")
    assert row["require_password_change"] is True
    assert row["is_temporary_password"] is True


def test_set_password_unknown_user_raises():
    store, _ = _store(user_row("E001", "e@co.com", password="old"))
    with pytest.raises(UserNotFound):
        store.set_password("E404", "x", require_change=False, is_temporary=False)


def test_list_users_keeps_insertion_order():
    store, _ = _store(
        user_row("B", "b@co.com", password="pw"),
        user_row("A", "a@co.com", password="pw"),
    )
    assert [u.employee_id for u in store.list_users()] == ["B", "A"]
