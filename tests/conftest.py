"""
Shared pytest fixtures.

The app is wired with in-memory fakes for both external collaborators:
identity comes from FakeIdentityProvider, catalog data from the static
demo catalog (or a failing/recording variant when a test needs one).
"""

from __future__ import annotations

import base64
import json
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from xeinst.core.exceptions import CatalogUnavailable
from xeinst.models.catalog import AgentListing, CatalogFilter, DashboardSummary
from xeinst.models.session import Authenticated, RequestContext, Role, Session
from xeinst.providers.catalog import StaticCatalogProvider


# ── Settings isolation ───────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch):
    """Fresh Settings per test, pinned to dev defaults."""
    from xeinst.core.config import get_settings

    monkeypatch.setenv("COGNITO_USER_POOL_ID", "")
    monkeypatch.setenv("CATALOG_BACKEND", "static")
    monkeypatch.setenv("LOG_FORMAT", "console")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ── Fakes ────────────────────────────────────────────────────────────────
class FakeIdentityProvider:
    """Returns a fixed session (or raises) and records sign-outs."""

    def __init__(self, session: Session | None = None, error: Exception | None = None) -> None:
        self.session = session
        self.error = error
        self.signed_out: list[str] = []

    def get_session(self, ctx: RequestContext) -> Session | None:
        if self.error is not None:
            raise self.error
        return self.session

    def sign_out(self, session: Authenticated) -> None:
        if self.error is not None:
            raise self.error
        self.signed_out.append(session.userId)


class RecordingCatalogProvider(StaticCatalogProvider):
    """Demo catalog that remembers every call made to it."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def list_agents(self, criteria: CatalogFilter) -> list[AgentListing]:
        self.calls.append("list_agents")
        return super().list_agents(criteria)

    def get_agent(self, agent_id: str) -> AgentListing | None:
        self.calls.append("get_agent")
        return super().get_agent(agent_id)

    def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        self.calls.append("get_dashboard_summary")
        return super().get_dashboard_summary(user_id)


class FailingCatalogProvider:
    def list_agents(self, criteria: CatalogFilter) -> list[AgentListing]:
        raise CatalogUnavailable("catalog down")

    def get_agent(self, agent_id: str) -> AgentListing | None:
        raise CatalogUnavailable("catalog down")

    def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        raise CatalogUnavailable("catalog down")


def make_token(claims: dict[str, Any]) -> str:
    """Unsigned JWT; accepted only in dev mode (no user pool configured)."""
    def _segment(data: dict[str, Any]) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    return f"{_segment({'alg': 'none', 'typ': 'JWT'})}.{_segment(claims)}.sig"


# ── Sessions ─────────────────────────────────────────────────────────────
@pytest.fixture
def consumer() -> Authenticated:
    return Authenticated(
        userId="user-consumer",
        displayName="Casey Consumer",
        email="casey@example.com",
        role=Role.CONSUMER,
    )


@pytest.fixture
def creator() -> Authenticated:
    return Authenticated(
        userId="user-creator",
        displayName=None,
        email="robin@example.com",
        role=Role.CREATOR,
    )


# ── App + HTTP client ────────────────────────────────────────────────────
@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def catalog() -> RecordingCatalogProvider:
    return RecordingCatalogProvider()


@pytest.fixture
def test_app(identity, catalog):
    from xeinst.api.deps import get_catalog_provider, get_identity_provider
    from xeinst.main import create_app

    app = create_app()
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_catalog_provider] = lambda: catalog
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
