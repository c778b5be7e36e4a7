"""
Name: Token Store Tests

Responsibilities:
  - Validate one-live-token-per-user on sequential and concurrent issue
  - Validate verify / lookup / revoke semantics (idempotent revoke)
"""

import threading
from datetime import datetime, timezone

import pytest
from conftest import TOKENS_TABLE

from journal_auth.identity.token_store import TokenStore
from journal_auth.infrastructure.row_store import InMemoryRowStore

pytestmark = pytest.mark.unit


@pytest.fixture
def backing() -> InMemoryRowStore:
    return InMemoryRowStore()


@pytest.fixture
def tokens(backing) -> TokenStore:
    return TokenStore(backing, table=TOKENS_TABLE)


def test_issue_token_format_and_row(tokens, backing):
    token = tokens.issue("E001")

    assert token.endswith("-E001")
    assert len(token.split("-", 1)[0]) == 32
    rows = backing.scan(TOKENS_TABLE)
    assert len(rows) == 1
    assert rows[0]["user_id"] == "E001"
    assert rows[0]["token"] == token
    assert rows[0]["issued_at"].tzinfo is not None


def test_second_issue_supersedes_first(tokens, backing):
    first = tokens.issue("E001")
    second = tokens.issue("E001")

    assert first != second
    assert not tokens.verify(first)
    assert tokens.verify(second)
    assert backing.count(TOKENS_TABLE, "user_id", "E001") == 1


def test_issue_heals_preexisting_duplicates(backing):
    backing.append(TOKENS_TABLE, {"user_id": "E001", "token": "stale-1"})
    backing.append(TOKENS_TABLE, {"user_id": "E001", "token": "stale-2"})
    tokens = TokenStore(backing, table=TOKENS_TABLE)

    fresh = tokens.issue("E001")

    assert backing.count(TOKENS_TABLE, "user_id", "E001") == 1
    assert tokens.verify(fresh)
    assert not tokens.verify("stale-1")


def test_issue_does_not_touch_other_users(tokens):
    other = tokens.issue("E002")
    tokens.issue("E001")
    assert tokens.verify(other)


def test_concurrent_issue_leaves_exactly_one_token(tokens, backing):
    issued: list[str] = []
    barrier = threading.Barrier(16)

    def worker() -> None:
        barrier.wait()
        issued.append(tokens.issue("E001"))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(issued) == 16
    assert backing.count(TOKENS_TABLE, "user_id", "E001") == 1
    assert sum(1 for t in issued if tokens.verify(t)) == 1


def test_revoke_is_idempotent(tokens):
    token = tokens.issue("E001")
    assert tokens.revoke(token) is True
    assert tokens.revoke(token) is False
    assert not tokens.verify(token)


def test_revoke_by_user(tokens):
    tokens.issue("E001")
    assert tokens.revoke_by_user("E001") is True
    assert tokens.revoke_by_user("E001") is False


def test_verify_and_lookup_empty_or_unknown(tokens):
    assert not tokens.verify("")
    assert tokens.lookup("missing") is None
    assert tokens.revoke("") is False


def test_lookup_returns_record_with_injected_clock(backing):
    fixed = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    tokens = TokenStore(
        backing,
        table=TOKENS_TABLE,
        token_factory=lambda uid: f"tok-{uid}",
        clock=lambda: fixed,
    )

    token = tokens.issue("E001")
    record = tokens.lookup(token)

    assert token == "tok-E001"
    assert record.user_id == "E001"
    assert record.issued_at == fixed


def test_issue_requires_user_id(tokens):
    with pytest.raises(ValueError):
        tokens.issue("  ")
