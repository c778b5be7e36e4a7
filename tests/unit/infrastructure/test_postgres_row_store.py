"""
Name: PostgreSQL Row Store Tests

Responsibilities:
  - Ensure the adapter issues one statement per operation on a mocked pool
  - Ensure driver errors surface as StorageError
"""

from unittest.mock import MagicMock

import psycopg
import pytest

from journal_auth.crosscutting.exceptions import StorageError
from journal_auth.infrastructure.row_store import PostgresRowStore

pytestmark = pytest.mark.unit


@pytest.fixture
def cursor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(cursor) -> PostgresRowStore:
    mock_pool = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__.return_value = cursor
    mock_pool.connection.return_value.__enter__.return_value = mock_conn
    return PostgresRowStore(pool=mock_pool)


def test_scan_drops_row_id(store, cursor):
    cursor.fetchall.return_value = [
        {"row_id": 1, "employee_id": "E001"},
        {"row_id": 2, "employee_id": "E002"},
    ]

    rows = store.scan("user")

    assert rows == [{"employee_id": "E001"}, {"employee_id": "E002"}]
    cursor.execute.assert_called_once()


def test_append_passes_values_in_column_order(store, cursor):
    store.append("tokens", {"user_id": "E001", "token": "t-E001"})

    _, params = cursor.execute.call_args.args
    assert params == ("E001", "t-E001")


def test_append_requires_columns(store):
    with pytest.raises(ValueError):
        store.append("tokens", {})


def test_update_where_reports_match(store, cursor):
    cursor.fetchone.return_value = {"row_id": 3}
    assert store.update_where("user", "employee_id", " E001 ", {"role": "admin"})

    _, params = cursor.execute.call_args.args
    assert params == ("admin", "E001")

    cursor.fetchone.return_value = None
    assert store.update_where("user", "employee_id", "E404", {"role": "x"}) is False


def test_delete_where_reports_match(store, cursor):
    cursor.fetchone.return_value = {"row_id": 9}
    assert store.delete_where("tokens", "user_id", 1001) is True

    _, params = cursor.execute.call_args.args
    assert params == ("1001",)


def test_driver_error_becomes_storage_error(store, cursor):
    cursor.execute.side_effect = psycopg.OperationalError("server closed")

    with pytest.raises(StorageError) as excinfo:
        store.scan("user")

    assert isinstance(excinfo.value.original_error, psycopg.OperationalError)


def test_ping(store, cursor):
    assert store.ping() is True

    cursor.execute.side_effect = psycopg.OperationalError("down")
    assert store.ping() is False
