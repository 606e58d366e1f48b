"""
Pydantic schemas for catalog data.

These are read-only, request-scoped copies of what the catalog provider
owns.  Nothing in the page layer writes them back.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

ALL_CATEGORIES = "All"

# Categories offered in the explore filter bar.  Listings may carry others;
# those are only reachable through "All" or search.
KNOWN_CATEGORIES: tuple[str, ...] = (
    "E-commerce",
    "Marketing",
    "Customer Support",
    "Data Analysis",
    "Content Creation",
    "Automation",
)


class AgentListing(BaseModel):
    """One marketplace-offered agent."""
    id: str
    name: str
    description: str = ""
    category: str
    price: Decimal = Field(ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    userCount: int = Field(default=0, ge=0)
    creatorName: str = ""
    invocationEndpoint: str = ""


class CatalogFilter(BaseModel):
    """
    Explore-page filter.

    searchTerm is matched case-insensitively as a substring of name or
    description; category must match exactly unless it is "All".
    """
    category: str = ALL_CATEGORIES
    searchTerm: str | None = None

    @property
    def needle(self) -> str:
        return (self.searchTerm or "").strip().lower()

    def matches(self, listing: AgentListing) -> bool:
        if self.category != ALL_CATEGORIES and listing.category != self.category:
            return False
        needle = self.needle
        if not needle:
            return True
        return needle in listing.name.lower() or needle in listing.description.lower()

    def apply(self, listings: list[AgentListing]) -> list[AgentListing]:
        """Filter preserving the provider's order."""
        return [listing for listing in listings if self.matches(listing)]


# ── Dashboard ─────────────────────────────────────────────────────────────────

class RecentAgentRow(BaseModel):
    id: str
    name: str
    category: str
    status: str = "active"          # active | paused | draft
    runs: int = Field(default=0, ge=0)
    revenue: Decimal = Decimal("0")
    users: int = Field(default=0, ge=0)


class ActivityItem(BaseModel):
    id: str
    kind: str                       # agent_run | payment | ...
    message: str
    timestamp: str                  # display-ready, e.g. "2 minutes ago"
    outcome: str = "success"        # success | pending | failed


class PerformanceStats(BaseModel):
    successRate: float = Field(ge=0, le=100)
    avgResponseSeconds: float = Field(ge=0)
    avgRating: float = Field(ge=0, le=5)


class DashboardSummary(BaseModel):
    agentCount: int = 0
    revenueTotal: Decimal = Decimal("0")
    userTotal: int = 0
    runTotal: int = 0
    # Month-over-month change lines, e.g. "+2 from last month"; empty when unknown
    agentTrend: str = ""
    revenueTrend: str = ""
    userTrend: str = ""
    runTrend: str = ""
    recentAgents: list[RecentAgentRow] = Field(default_factory=list)
    recentActivity: list[ActivityItem] = Field(default_factory=list)
    performance: PerformanceStats | None = None
