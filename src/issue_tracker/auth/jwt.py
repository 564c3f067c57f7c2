"""
issue_tracker.auth.jwt

Session token issuing and validation.

Responsibilities:
- Issue signed, stateless identity tokens with a fixed 7-day lifetime.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub/role).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from issue_tracker.auth.errors import InvalidToken, SigningSecretMissing
from issue_tracker.auth.models import GlobalRole, TokenClaims
from issue_tracker.settings import Settings

TOKEN_TTL = timedelta(days=7)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str | None

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )

    def signing_key(self) -> str:
        if not self.secret:
            raise SigningSecretMissing()
        return self.secret


def issue_token(
    *,
    cfg: JwtConfig,
    subject_id: uuid.UUID,
    global_role: GlobalRole,
    now: datetime | None = None,
) -> str:
    key = cfg.signing_key()
    issued = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(subject_id),
        "role": global_role.value,
        "iat": int(issued.timestamp()),
        "exp": int((issued + TOKEN_TTL).timestamp()),
    }
    return jwt.encode(payload, key, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> TokenClaims:
    key = cfg.signing_key()
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        payload = jwt.decode(
            token,
            key,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise InvalidToken() from e

    try:
        return TokenClaims(
            subject_id=uuid.UUID(str(payload["sub"])),
            global_role=GlobalRole(payload.get("role")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
    except (KeyError, TypeError, ValueError) as e:
        # Signed by us but not shaped like our tokens.
        raise InvalidToken() from e


# --- Module Notes -----------------------------------------------------------
# Tokens carry no server-side state; revocation is handled by the identity
# resolver re-reading the user on every request.
