"""
xeinst/core/cognito.py

Cognito JWT verification using RS256 + JWKS, plus the global sign-out call.

Behaviour
---------
* COGNITO_USER_POOL_ID is set  →  full RS256 + claims verification via JWKS.
* COGNITO_USER_POOL_ID is empty →  dev/test mode: base64-decode without
  signature verification.  A warning is emitted on each decode.

Token types accepted
--------------------
* ID token     (token_use=id)      — issued after login, contains email/name.
* Access token (token_use=access)  — no email claim; the session falls back
                                     to an empty email.

PyJWKClient caches the JWKS in memory and re-fetches only when a kid is
not found in the local cache (automatic key rotation handling).
"""

from __future__ import annotations

import base64
import json
import warnings
from typing import Any

import boto3
import jwt
from jwt import PyJWKClient, PyJWTError

from xeinst.core.config import Settings, get_settings

# Module-level singletons — initialised lazily on first use.
_jwks_client: PyJWKClient | None = None
_idp_client: Any = None


def _issuer(settings: Settings) -> str:
    return (
        f"https://cognito-idp.{settings.cognito_region}.amazonaws.com"
        f"/{settings.cognito_user_pool_id}"
    )


def _get_jwks_client() -> PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(f"{_issuer(get_settings())}/.well-known/jwks.json")
    return _jwks_client


def get_idp_client() -> Any:
    """Shared boto3 cognito-idp client (used for sign-out)."""
    global _idp_client
    if _idp_client is None:
        settings = get_settings()
        _idp_client = boto3.client("cognito-idp", region_name=settings.cognito_region)
    return _idp_client


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify a Cognito JWT and return its decoded claims.

    Raises jwt.PyJWTError (or a subclass) on any failure:
      - expired token
      - invalid signature
      - wrong issuer / audience / token_use
      - malformed token
    """
    settings = get_settings()

    if not settings.cognito_user_pool_id:
        warnings.warn(
            "COGNITO_USER_POOL_ID is not set — running in dev mode with "
            "NO signature verification. Never use this in production.",
            stacklevel=2,
        )
        return _dev_decode(token)

    return _verify_with_jwks(token, settings)


def _verify_with_jwks(token: str, settings: Settings) -> dict[str, Any]:
    """Full RS256 + claims verification against Cognito JWKS."""
    signing_key = _get_jwks_client().get_signing_key_from_jwt(token)

    # verify_aud=False because access tokens have no 'aud' claim;
    # we check client_id / aud manually below.
    claims: dict[str, Any] = jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        options={"verify_aud": False},
    )

    # ── Issuer ────────────────────────────────────────────────────────────────
    if claims.get("iss") != _issuer(settings):
        raise PyJWTError(
            f"Token issuer {claims.get('iss')!r} does not match User Pool"
        )

    # ── Token use ─────────────────────────────────────────────────────────────
    token_use = claims.get("token_use")
    if token_use not in ("access", "id"):
        raise PyJWTError(f"Unexpected token_use: {token_use!r}")

    # ── Audience / client_id ──────────────────────────────────────────────────
    if settings.cognito_client_id:
        if token_use == "access":
            if claims.get("client_id") != settings.cognito_client_id:
                raise PyJWTError("Access token client_id does not match app client")
        elif claims.get("aud") != settings.cognito_client_id:
            raise PyJWTError("ID token audience does not match app client")

    return claims


def _dev_decode(token: str) -> dict[str, Any]:
    """
    Decode JWT payload WITHOUT signature verification.
    For local development only.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise PyJWTError("Malformed JWT: expected 3 dot-separated segments")
    padded = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(padded))
    except ValueError as exc:
        raise PyJWTError(f"Cannot decode token payload: {exc}") from exc
    if not isinstance(claims, dict):
        raise PyJWTError("Token payload is not a JSON object")
    return claims


def global_sign_out(user_id: str) -> None:
    """
    Invalidate every refresh/access token issued to ``user_id``.

    Raises botocore ClientError on failure; callers decide which error codes
    mean "already signed out".
    """
    settings = get_settings()
    get_idp_client().admin_user_global_sign_out(
        UserPoolId=settings.cognito_user_pool_id,
        Username=user_id,
    )
