"""
Display models consumed by the renderer.

Everything the templates need is computed by the view-model assembler and
stored here as inert data: the renderer never looks at a Session, never
calls a provider and never re-derives role checks.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from xeinst.models.catalog import (
    ActivityItem,
    AgentListing,
    PerformanceStats,
    RecentAgentRow,
)


# ── Shared pieces ─────────────────────────────────────────────────────────────

class Link(BaseModel):
    label: str
    href: str
    variant: str = "default"        # default | outline | secondary | ghost


class UserMenu(BaseModel):
    displayName: str
    email: str
    links: list[Link] = Field(default_factory=list)
    signOutAction: str = "/auth/signout"


class NavigationView(BaseModel):
    brand: str
    badge: str
    links: list[Link]
    user: UserMenu | None = None
    # Shown only when there is no user menu
    authLinks: list[Link] = Field(default_factory=list)


class FeatureCard(BaseModel):
    title: str
    description: str
    icon: str


class StatTile(BaseModel):
    title: str
    value: str
    trend: str = ""
    icon: str = ""


# ── Page bodies ───────────────────────────────────────────────────────────────

class LandingView(BaseModel):
    kind: Literal["landing"] = "landing"
    badge: str
    headline: str
    tagline: str
    heroActions: list[Link]
    features: list[FeatureCard]
    categories: list[str]
    ctaHeadline: str
    ctaTagline: str
    ctaActions: list[Link]


class ExploreView(BaseModel):
    kind: Literal["explore"] = "explore"
    agents: list[AgentListing] = Field(default_factory=list)
    categories: list[str]
    selectedCategory: str
    searchTerm: str = ""
    unavailable: bool = False
    notice: str | None = None


class AgentDetailView(BaseModel):
    kind: Literal["agent_detail"] = "agent_detail"
    agentId: str
    agent: AgentListing | None = None
    notFound: bool = False
    unavailable: bool = False
    notice: str | None = None


class DashboardView(BaseModel):
    kind: Literal["dashboard"] = "dashboard"
    greetingName: str
    stats: list[StatTile]
    # Capability flag computed once from the session role
    isCreator: bool = False
    recentAgents: list[RecentAgentRow] = Field(default_factory=list)
    recentActivity: list[ActivityItem] = Field(default_factory=list)
    performance: PerformanceStats | None = None
    unavailable: bool = False
    notice: str | None = None


class NoticeView(BaseModel):
    """Fixed-content status page (payment result, sign-in notices)."""
    kind: Literal["notice"] = "notice"
    tone: str                       # success | warning | info
    heading: str
    subheading: str
    cardTitle: str
    cardDescription: str
    bulletsTitle: str = ""
    bullets: list[str] = Field(default_factory=list)
    note: str = ""
    actions: list[Link] = Field(default_factory=list)
    footer: str = ""
    footerLink: Link | None = None
    footerTail: str = ""


PageContent = Annotated[
    Union[LandingView, ExploreView, AgentDetailView, DashboardView, NoticeView],
    Field(discriminator="kind"),
]


class Page(BaseModel):
    title: str
    nav: NavigationView
    content: PageContent
    statusCode: int = 200


def money(amount: Decimal | float) -> str:
    """Format a currency amount for display, e.g. 2847.5 → "$2,847.50"."""
    return f"${Decimal(str(amount)):,.2f}"
