"""
issue_tracker.auth.passwords

Password hashing (bcrypt).

Responsibilities:
- Produce salted, cost-configurable one-way digests.
- Verify plaintext against a stored digest without ever raising.
"""

from __future__ import annotations

import bcrypt

# bcrypt only reads the first 72 bytes of input; newer releases raise instead of truncating.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        # gensalt() draws a fresh salt per call, so equal inputs give different digests.
        digest = bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self._rounds))
        return digest.decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(plaintext), digest.encode("utf-8"))
        except ValueError:
            # Malformed or foreign digest ("Invalid salt").
            return False


# --- Module Notes -----------------------------------------------------------
# Hashing is CPU-bound and synchronous; at the default cost a call takes a few
# hundred milliseconds, which is acceptable for login/registration paths only.
