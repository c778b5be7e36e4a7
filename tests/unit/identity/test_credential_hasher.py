"""
Name: Credential Hasher Tests

Responsibilities:
  - Validate deterministic SHA-256 derivation
  - Cover the bootstrap (temporary) password path
  - Ensure a digest-shaped candidate is hashed like any typed password
"""

import hashlib

import pytest

from journal_auth.identity.credential_hasher import (
    CredentialHasher,
    is_digest,
    local_part_of,
)

pytestmark = pytest.mark.unit

BOOTSTRAP = "Init4321"


def _sha(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(BOOTSTRAP)


def test_hash_is_lowercase_hex_sha256(hasher):
    digest = hasher.hash("hello")
    assert digest == _sha("hello")
    assert len(digest) == 64
    assert digest == digest.lower()


def test_derive_password_uses_local_part_plus_employee_id(hasher):
    assert hasher.derive_password("somchai@co.com", "E001") == _sha("somchaiE001")


def test_derive_password_is_pure(hasher):
    first = hasher.derive_password("a@b.com", "42")
    second = CredentialHasher("other").derive_password("a@b.com", "42")
    assert first == second


def test_local_part_without_at_uses_whole_string():
    assert local_part_of("no-at-sign") == "no-at-sign"
    assert local_part_of("x@y@z") == "x"
    assert local_part_of("") == ""


@pytest.mark.parametrize("plain", ["somchaiE001", "wrong", "somchai", "E001"])
def test_verify_matches_derived_iff_hash_equal(hasher, plain):
    derived = hasher.derive_password("somchai@co.com", "E001")
    expected = _sha(plain) == derived
    assert hasher.verify(plain, "somchai@co.com", "E001") is expected


def test_verify_against_stored_hash(hasher):
    stored = _sha("NewPass1!")
    assert hasher.verify("NewPass1!", "x@co.com", "E1", stored_hash=stored)
    assert not hasher.verify("nope", "x@co.com", "E1", stored_hash=stored)


def test_verify_accepts_uppercase_stored_hash(hasher):
    stored = _sha("NewPass1!").upper()
    assert hasher.verify("NewPass1!", "x@co.com", "E1", stored_hash=stored)


def test_bootstrap_password_accepted_when_stored_hash_is_bootstrap(hasher):
    assert hasher.verify(
        BOOTSTRAP, "x@co.com", "E1", stored_hash=hasher.bootstrap_hash
    )


def test_bootstrap_password_rejected_for_regular_stored_hash(hasher):
    assert not hasher.verify(
        BOOTSTRAP, "x@co.com", "E1", stored_hash=_sha("something-else")
    )


def test_bootstrap_password_rejected_without_stored_hash(hasher):
    assert not hasher.verify(BOOTSTRAP, "x@co.com", "E1")


def test_digest_shaped_candidate_is_hashed_not_compared(hasher):
    # R: pasar el hash guardado como "password" no debe autenticar.
    stored = hasher.derive_password("x@co.com", "E1")
    assert not hasher.verify(stored, "x@co.com", "E1")
    assert not hasher.verify(stored, "x@co.com", "E1", stored_hash=stored)


def test_verify_hash_compares_digest_directly(hasher):
    stored = hasher.derive_password("x@co.com", "E1")
    assert hasher.verify_hash(stored, "x@co.com", "E1")
    assert hasher.verify_hash(stored.upper(), "x@co.com", "E1", stored_hash=stored)
    assert not hasher.verify_hash("not-a-digest", "x@co.com", "E1")


def test_empty_candidate_never_verifies(hasher):
    assert not hasher.verify("", "x@co.com", "E1", stored_hash=_sha(""))


def test_is_digest():
    assert is_digest(_sha("x"))
    assert not is_digest("z" * 64)
    assert not is_digest(None)
