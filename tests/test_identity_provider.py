"""
Cognito identity provider tests.

Runs in dev mode (no user pool) so tokens are decoded without signature
verification; sign-out paths patch the Cognito call.
"""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError
from conftest import make_token
from jwt import PyJWTError

from xeinst.core import cognito
from xeinst.core.config import get_settings
from xeinst.core.exceptions import IdentityUnavailable
from xeinst.models.session import Authenticated, RequestContext, Role
from xeinst.providers.identity import CognitoIdentityProvider, session_from_claims

CLAIMS = {
    "sub": "abc-123",
    "email": "jo@example.com",
    "name": "Jo Maker",
    "token_use": "id",
}


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "AdminUserGlobalSignOut")


# ── Claims mapping ──────────────────────────────────────────────────────


def test_claims_map_to_consumer_by_default():
    session = session_from_claims(CLAIMS)

    assert session == Authenticated(
        userId="abc-123", displayName="Jo Maker", email="jo@example.com", role=Role.CONSUMER
    )


def test_custom_role_claim_marks_creator():
    session = session_from_claims({**CLAIMS, "custom:role": "creator"})
    assert session is not None and session.role == Role.CREATOR


def test_creator_group_marks_creator():
    session = session_from_claims({**CLAIMS, "cognito:groups": ["beta", "creators"]})
    assert session is not None and session.role == Role.CREATOR


def test_display_name_falls_back_to_username():
    claims = {"sub": "abc-123", "cognito:username": "jo"}
    session = session_from_claims(claims)

    assert session is not None
    assert session.displayName == "jo"
    assert session.email == ""


def test_missing_sub_is_no_session():
    assert session_from_claims({"email": "jo@example.com"}) is None


# ── Token handling (dev mode) ───────────────────────────────────────────


def test_dev_decode_rejects_malformed_token():
    with pytest.raises(PyJWTError):
        cognito._dev_decode("not-a-jwt")


def test_session_from_bearer_header():
    provider = CognitoIdentityProvider()
    ctx = RequestContext(authorization=f"Bearer {make_token(CLAIMS)}")

    session = provider.get_session(ctx)

    assert isinstance(session, Authenticated)
    assert session.userId == "abc-123"


@pytest.mark.parametrize("scheme", ["bearer", "BEARER", "BeArEr"])
def test_bearer_scheme_is_case_insensitive(scheme):
    ctx = RequestContext(authorization=f"{scheme} {make_token(CLAIMS)}")

    session = CognitoIdentityProvider().get_session(ctx)

    assert isinstance(session, Authenticated)
    assert session.userId == "abc-123"


def test_other_auth_scheme_falls_back_to_cookie():
    name = get_settings().session_cookie_name
    ctx = RequestContext(authorization="Basic dXNlcjpwYXNz", cookies={name: make_token(CLAIMS)})

    session = CognitoIdentityProvider().get_session(ctx)

    assert isinstance(session, Authenticated)
    assert session.email == "jo@example.com"


def test_session_from_cookie():
    provider = CognitoIdentityProvider()
    name = get_settings().session_cookie_name
    ctx = RequestContext(cookies={name: make_token(CLAIMS)})

    session = provider.get_session(ctx)

    assert isinstance(session, Authenticated)
    assert session.email == "jo@example.com"


def test_no_credential_is_no_session():
    assert CognitoIdentityProvider().get_session(RequestContext()) is None


def test_invalid_token_is_no_session():
    ctx = RequestContext(authorization="Bearer garbage")
    assert CognitoIdentityProvider().get_session(ctx) is None


# ── Sign-out ────────────────────────────────────────────────────────────


@pytest.fixture
def user_pool(monkeypatch):
    monkeypatch.setenv("COGNITO_USER_POOL_ID", "us-east-1_TestPool")
    get_settings.cache_clear()


def test_sign_out_in_dev_mode_skips_cognito(monkeypatch, consumer):
    def _fail(user_id):
        raise AssertionError("Cognito must not be called in dev mode")

    monkeypatch.setattr(cognito, "global_sign_out", _fail)
    CognitoIdentityProvider().sign_out(consumer)


def test_sign_out_calls_cognito(monkeypatch, user_pool, consumer):
    calls: list[str] = []
    monkeypatch.setattr(cognito, "global_sign_out", calls.append)

    CognitoIdentityProvider().sign_out(consumer)

    assert calls == ["user-consumer"]


@pytest.mark.parametrize("code", ["UserNotFoundException", "NotAuthorizedException"])
def test_sign_out_already_signed_out_is_quiet(monkeypatch, user_pool, consumer, code):
    def _raise(user_id):
        raise _client_error(code)

    monkeypatch.setattr(cognito, "global_sign_out", _raise)
    CognitoIdentityProvider().sign_out(consumer)


def test_sign_out_other_errors_raise_identity_unavailable(monkeypatch, user_pool, consumer):
    def _raise(user_id):
        raise _client_error("InternalErrorException")

    monkeypatch.setattr(cognito, "global_sign_out", _raise)
    with pytest.raises(IdentityUnavailable):
        CognitoIdentityProvider().sign_out(consumer)
