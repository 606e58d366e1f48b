"""
SessionResolver — turns a request's opaque credential into a Session.

Rules:
  - resolve() never raises.  No credential, a rejected credential, or any
    identity-provider failure all resolve to Anonymous (fail closed: a
    visible sign-in prompt is better than a broken page).
  - sign_out() is a command, not part of rendering.  It is idempotent and
    a no-op for Anonymous; provider failures are logged so navigation can
    continue regardless.
"""

from __future__ import annotations

from xeinst.core.logging import get_logger
from xeinst.models.session import ANONYMOUS, Authenticated, RequestContext, Session
from xeinst.providers.identity import IdentityProvider

logger = get_logger(__name__)


class SessionResolver:

    def __init__(self, identity: IdentityProvider) -> None:
        self._identity = identity

    def resolve(self, ctx: RequestContext) -> Session:
        try:
            session = self._identity.get_session(ctx)
        except Exception as exc:  # any provider fault degrades to Anonymous
            logger.warning("session.resolve_failed", error=str(exc), error_type=type(exc).__name__)
            return ANONYMOUS
        return session if session is not None else ANONYMOUS

    def sign_out(self, session: Session) -> None:
        if not isinstance(session, Authenticated):
            return
        try:
            self._identity.sign_out(session)
        except Exception as exc:
            logger.warning(
                "auth.sign_out_failed",
                user_id=session.userId,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return
        logger.info("auth.sign_out", user_id=session.userId)
