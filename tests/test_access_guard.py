"""
Access guard tests.

Validates:
- guard() is total and deterministic over every (session, requirement) pair
- Anonymous on a gated page always redirects to /auth/signin
- Public pages always proceed
"""

from __future__ import annotations

import itertools

import pytest

from xeinst.models.session import ANONYMOUS, Authenticated, Role
from xeinst.services.access_guard import (
    PAGE_REQUIREMENTS,
    SIGNIN_PATH,
    PageRequirement,
    Proceed,
    RedirectTo,
    guard,
)

SESSIONS = [
    ANONYMOUS,
    Authenticated(userId="u1", email="a@example.com", role=Role.CONSUMER),
    Authenticated(userId="u2", email="b@example.com", role=Role.CREATOR),
]


@pytest.mark.parametrize(
    "session,requirement", list(itertools.product(SESSIONS, list(PageRequirement)))
)
def test_guard_is_total_and_deterministic(session, requirement):
    first = guard(session, requirement)
    second = guard(session, requirement)

    assert isinstance(first, (Proceed, RedirectTo))
    assert first == second


def test_anonymous_on_gated_page_redirects_to_signin():
    assert guard(ANONYMOUS, PageRequirement.REQUIRES_AUTH) == RedirectTo("/auth/signin")
    assert SIGNIN_PATH == "/auth/signin"


@pytest.mark.parametrize("session", SESSIONS)
def test_public_always_proceeds(session):
    assert isinstance(guard(session, PageRequirement.PUBLIC), Proceed)


@pytest.mark.parametrize("session", SESSIONS[1:])
def test_authenticated_proceeds_on_gated_page(session):
    assert isinstance(guard(session, PageRequirement.REQUIRES_AUTH), Proceed)


def test_only_dashboard_is_gated():
    gated = {path for path, req in PAGE_REQUIREMENTS.items() if req == PageRequirement.REQUIRES_AUTH}
    assert gated == {"/dashboard"}
    for path in ("/", "/explore", "/auth/verify-request", "/success", "/cancel"):
        assert PAGE_REQUIREMENTS[path] == PageRequirement.PUBLIC
