"""
issue_tracker.auth.resolver

Identity resolution.

Responsibilities:
- Turn a bearer token into a live `Principal`.
- Reject tokens whose subject was deleted or deactivated after issuance.
"""

from __future__ import annotations

from issue_tracker.auth.errors import InvalidToken, UnknownOrInactiveSubject
from issue_tracker.auth.jwt import JwtConfig, decode_and_validate
from issue_tracker.auth.models import Principal
from issue_tracker.auth.ports import AuthStore
from issue_tracker.observability.logging import get_logger

log = get_logger(__name__)


class IdentityResolver:
    def __init__(self, *, store: AuthStore, jwt_cfg: JwtConfig) -> None:
        self._store = store
        self._jwt_cfg = jwt_cfg

    async def resolve(self, token: str) -> Principal:
        try:
            claims = decode_and_validate(cfg=self._jwt_cfg, token=token)
        except InvalidToken:
            log.info("token_rejected")
            raise

        # Deactivation is the only revocation mechanism, so the user is read on every call.
        user = await self._store.get_user(claims.subject_id)
        if user is None or not user.is_active:
            log.info("principal_rejected", user_id=str(claims.subject_id))
            raise UnknownOrInactiveSubject()

        # Role comes from storage, not the token: role changes apply on the next request.
        return Principal(id=user.id, global_role=user.role, is_active=user.is_active)


# --- Module Notes -----------------------------------------------------------
# The token's `role` claim is informational for clients; authorization never
# trusts it.
