"""
Identity provider — who is making this request, and sign-out.

The page layer only depends on the ``IdentityProvider`` protocol.  The
Cognito implementation reads the bearer token from the Authorization header
or, for browser navigation, from the session cookie.
"""

from __future__ import annotations

from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError
from jwt import PyJWTError

from xeinst.core import cognito
from xeinst.core.config import get_settings
from xeinst.core.exceptions import IdentityUnavailable
from xeinst.core.logging import get_logger
from xeinst.models.session import Authenticated, RequestContext, Role, Session

logger = get_logger(__name__)

# Cognito answers these when the user or their tokens are already gone
_ALREADY_SIGNED_OUT = frozenset({"UserNotFoundException", "NotAuthorizedException"})


class IdentityProvider(Protocol):

    def get_session(self, ctx: RequestContext) -> Session | None:
        """Return the session for ``ctx``, or None when there is none."""
        ...

    def sign_out(self, session: Authenticated) -> None:
        """Invalidate ``session``. Must be idempotent."""
        ...


def session_from_claims(
    claims: dict[str, Any], creator_group: str = "creators"
) -> Authenticated | None:
    """Map verified JWT claims to a session. Returns None without a 'sub'."""
    user_id = claims.get("sub")
    if not user_id:
        return None

    display_name = (
        claims.get("name")
        or claims.get("preferred_username")
        or claims.get("cognito:username")
        or None
    )

    role = Role.CONSUMER
    raw_role = str(claims.get("custom:role") or "").upper()
    groups = claims.get("cognito:groups") or []
    if raw_role == Role.CREATOR or creator_group in groups:
        role = Role.CREATOR

    return Authenticated(
        userId=str(user_id),
        displayName=display_name,
        email=claims.get("email") or "",
        role=role,
    )


class CognitoIdentityProvider:

    def __init__(self) -> None:
        self._settings = get_settings()

    def _credential(self, ctx: RequestContext) -> str | None:
        if ctx.authorization:
            scheme, _, token = ctx.authorization.strip().partition(" ")
            if scheme.lower() == "bearer":
                return token.strip() or None
        return ctx.cookies.get(self._settings.session_cookie_name) or None

    def get_session(self, ctx: RequestContext) -> Session | None:
        token = self._credential(ctx)
        if token is None:
            return None
        try:
            claims = cognito.verify_token(token)
        except PyJWTError as exc:
            logger.info("identity.token_rejected", reason=str(exc))
            return None
        return session_from_claims(claims, self._settings.cognito_creator_group)

    def sign_out(self, session: Authenticated) -> None:
        if not self._settings.cognito_user_pool_id:
            logger.info("identity.sign_out_skipped", user_id=session.userId, reason="dev mode")
            return
        try:
            cognito.global_sign_out(session.userId)
        except ClientError as exc:
            code = exc.response["Error"]["Code"]
            if code in _ALREADY_SIGNED_OUT:
                logger.info("identity.already_signed_out", user_id=session.userId, code=code)
                return
            raise IdentityUnavailable(f"Cognito sign-out failed: {code}") from exc
        except BotoCoreError as exc:
            raise IdentityUnavailable(f"Cognito unreachable: {exc}") from exc
