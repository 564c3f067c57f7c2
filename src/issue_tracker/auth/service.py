"""
issue_tracker.auth.service

Session/auth facade.

Responsibilities:
- Login: credential check, account status check, token issuance.
- Open a session for a freshly registered user.
- Resolve a bearer token into a `Principal`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from issue_tracker.auth.errors import AccountInactive, InvalidCredentials
from issue_tracker.auth.jwt import JwtConfig, issue_token
from issue_tracker.auth.models import GlobalRole, Principal
from issue_tracker.auth.passwords import PasswordHasher
from issue_tracker.auth.ports import AuthStore, UserRecord
from issue_tracker.auth.resolver import IdentityResolver
from issue_tracker.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PublicUser:
    """Redacted user view; never carries the password digest."""

    id: uuid.UUID
    username: str
    email: str
    name: str | None
    role: GlobalRole
    is_active: bool

    @classmethod
    def from_record(cls, user: UserRecord) -> PublicUser:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            name=user.name,
            role=user.role,
            is_active=user.is_active,
        )


@dataclass(frozen=True, slots=True)
class Session:
    token: str
    user: PublicUser


class AuthService:
    def __init__(
        self,
        *,
        store: AuthStore,
        hasher: PasswordHasher,
        jwt_cfg: JwtConfig,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._jwt_cfg = jwt_cfg
        self._resolver = IdentityResolver(store=store, jwt_cfg=jwt_cfg)

    def hash_password(self, plaintext: str) -> str:
        return self._hasher.hash(plaintext)

    async def login(self, username: str, password: str) -> Session:
        user = await self._store.get_user_by_username(username)
        # Unknown user and wrong password are indistinguishable to the caller.
        if user is None or not self._hasher.verify(password, user.password_hash):
            log.info("login_rejected", reason="invalid_credentials")
            raise InvalidCredentials()

        # Only checked after the password matched, so it leaks nothing to a guesser.
        if not user.is_active:
            log.info("login_rejected", reason="account_inactive", user_id=str(user.id))
            raise AccountInactive()

        session = self.open_session(user)
        log.info("login_succeeded", user_id=str(user.id))
        return session

    def open_session(self, user: UserRecord) -> Session:
        token = issue_token(cfg=self._jwt_cfg, subject_id=user.id, global_role=user.role)
        return Session(token=token, user=PublicUser.from_record(user))

    async def principal_from_token(self, token: str) -> Principal:
        return await self._resolver.resolve(token)


# --- Module Notes -----------------------------------------------------------
# Registration itself (uniqueness checks, row creation) lives in
# `services.users`; this facade only hashes and issues.
