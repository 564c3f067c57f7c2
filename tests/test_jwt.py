"""
tests.test_jwt

Session token issuing and validation.
"""

from __future__ import annotations

import dataclasses
import uuid
from datetime import UTC, datetime, timedelta

import jwt as pyjwt
import pytest

from issue_tracker.auth.errors import InvalidToken, SigningSecretMissing
from issue_tracker.auth.jwt import TOKEN_TTL, JwtConfig, decode_and_validate, issue_token
from issue_tracker.auth.models import GlobalRole


def test_round_trip_carries_subject_and_role(jwt_cfg: JwtConfig) -> None:
    subject = uuid.uuid4()
    token = issue_token(cfg=jwt_cfg, subject_id=subject, global_role=GlobalRole.developer)

    claims = decode_and_validate(cfg=jwt_cfg, token=token)

    assert claims.subject_id == subject
    assert claims.global_role == GlobalRole.developer
    assert claims.expires_at - claims.issued_at == TOKEN_TTL


def test_expired_token_is_rejected(jwt_cfg: JwtConfig) -> None:
    issued = datetime.now(tz=UTC) - TOKEN_TTL - timedelta(minutes=1)
    token = issue_token(
        cfg=jwt_cfg, subject_id=uuid.uuid4(), global_role=GlobalRole.user, now=issued
    )

    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=jwt_cfg, token=token)


def test_token_near_end_of_window_is_accepted(jwt_cfg: JwtConfig) -> None:
    issued = datetime.now(tz=UTC) - TOKEN_TTL + timedelta(minutes=5)
    token = issue_token(
        cfg=jwt_cfg, subject_id=uuid.uuid4(), global_role=GlobalRole.user, now=issued
    )

    decode_and_validate(cfg=jwt_cfg, token=token)


def test_bad_signature_is_rejected(jwt_cfg: JwtConfig) -> None:
    other = dataclasses.replace(jwt_cfg, secret="some-other-secret")
    token = issue_token(cfg=other, subject_id=uuid.uuid4(), global_role=GlobalRole.user)

    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=jwt_cfg, token=token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(jwt_cfg: JwtConfig, token: str) -> None:
    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=jwt_cfg, token=token)


def test_wrong_audience_is_rejected(jwt_cfg: JwtConfig) -> None:
    other = dataclasses.replace(jwt_cfg, audience="someone-else")
    token = issue_token(cfg=other, subject_id=uuid.uuid4(), global_role=GlobalRole.user)

    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=jwt_cfg, token=token)


def test_signed_token_with_foreign_shape_is_rejected(jwt_cfg: JwtConfig) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    token = pyjwt.encode(
        {
            "iss": jwt_cfg.issuer,
            "aud": jwt_cfg.audience,
            "sub": "not-a-uuid",
            "role": "ROOT",
            "iat": now,
            "exp": now + 60,
        },
        jwt_cfg.secret,
        algorithm=jwt_cfg.alg,
    )

    with pytest.raises(InvalidToken):
        decode_and_validate(cfg=jwt_cfg, token=token)


def test_missing_secret_is_fatal(jwt_cfg: JwtConfig) -> None:
    unsigned = dataclasses.replace(jwt_cfg, secret=None)

    with pytest.raises(SigningSecretMissing):
        issue_token(cfg=unsigned, subject_id=uuid.uuid4(), global_role=GlobalRole.user)
    with pytest.raises(SigningSecretMissing):
        decode_and_validate(cfg=unsigned, token="whatever")
