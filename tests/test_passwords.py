"""
tests.test_passwords

Credential hashing behavior.
"""

from __future__ import annotations

import pytest

from issue_tracker.auth.passwords import PasswordHasher


@pytest.mark.parametrize("password", ["hunter22", "", "pässwörd ✓", "x" * 100])
def test_hash_verifies_and_is_salted(hasher: PasswordHasher, password: str) -> None:
    first = hasher.hash(password)
    second = hasher.hash(password)

    assert first != second
    assert hasher.verify(password, first)
    assert hasher.verify(password, second)


def test_wrong_password_does_not_verify(hasher: PasswordHasher) -> None:
    digest = hasher.hash("right-password")
    assert not hasher.verify("wrong-password", digest)


@pytest.mark.parametrize("digest", ["", "not-a-bcrypt-digest", "$2b$04$short"])
def test_malformed_digest_verifies_false(hasher: PasswordHasher, digest: str) -> None:
    assert hasher.verify("anything", digest) is False


def test_cost_factor_is_encoded_in_digest() -> None:
    digest = PasswordHasher(rounds=5).hash("pw")
    assert digest.startswith("$2b$05$")
