"""
Catalog provider — listable agents and per-user dashboard figures.

Two backends, selected by CATALOG_BACKEND:

  static   — the built-in demo catalog shipped with the marketplace.
  dynamodb — the single-table catalog, read through ListingDAO / ActivityDAO.

Both apply ``CatalogFilter`` in memory after fetching, the same way for
every backend, so filtering semantics never depend on the store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Protocol, TypeVar

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from xeinst.core.config import get_settings
from xeinst.core.exceptions import CatalogUnavailable
from xeinst.core.logging import get_logger
from xeinst.dao.activity_dao import ActivityDAO
from xeinst.dao.listing_dao import ListingDAO
from xeinst.models.catalog import (
    ActivityItem,
    AgentListing,
    CatalogFilter,
    DashboardSummary,
    PerformanceStats,
    RecentAgentRow,
)

logger = get_logger(__name__)


class CatalogProvider(Protocol):

    def list_agents(self, criteria: CatalogFilter) -> list[AgentListing]:
        ...

    def get_agent(self, agent_id: str) -> AgentListing | None:
        ...

    def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        ...


# ── Static demo catalog ───────────────────────────────────────────────────────

DEMO_LISTINGS: tuple[AgentListing, ...] = (
    AgentListing(
        id="1",
        name="E-commerce Analyzer",
        description="Analyze your e-commerce performance and get actionable insights",
        category="E-commerce",
        price=Decimal("29.99"),
        rating=4.8,
        userCount=1247,
        creatorName="DataFlow AI",
        invocationEndpoint="https://api.dataflow.ai/ecommerce-analyzer",
    ),
    AgentListing(
        id="2",
        name="Social Media Scheduler",
        description="Automatically schedule and post content across all social platforms",
        category="Marketing",
        price=Decimal("19.99"),
        rating=4.6,
        userCount=892,
        creatorName="SocialBot Pro",
        invocationEndpoint="https://api.socialbot.pro/scheduler",
    ),
    AgentListing(
        id="3",
        name="Customer Support Bot",
        description="Handle customer inquiries 24/7 with intelligent responses",
        category="Customer Support",
        price=Decimal("39.99"),
        rating=4.9,
        userCount=2156,
        creatorName="SupportAI",
        invocationEndpoint="https://api.supportai.com/bot",
    ),
    AgentListing(
        id="4",
        name="Data Visualization Generator",
        description="Create beautiful charts and reports from your data automatically",
        category="Data Analysis",
        price=Decimal("24.99"),
        rating=4.7,
        userCount=1567,
        creatorName="VizAI",
        invocationEndpoint="https://api.vizai.com/generator",
    ),
    AgentListing(
        id="5",
        name="Content Writer",
        description="Generate high-quality blog posts, emails, and marketing copy",
        category="Content Creation",
        price=Decimal("34.99"),
        rating=4.5,
        userCount=2341,
        creatorName="WriteAI",
        invocationEndpoint="https://api.writeai.com/writer",
    ),
    AgentListing(
        id="6",
        name="Workflow Automator",
        description="Automate repetitive tasks and streamline your business processes",
        category="Automation",
        price=Decimal("44.99"),
        rating=4.8,
        userCount=1892,
        creatorName="AutoFlow",
        invocationEndpoint="https://api.autoflow.com/automator",
    ),
)


def _demo_summary() -> DashboardSummary:
    return DashboardSummary(
        agentCount=12,
        revenueTotal=Decimal("2847.50"),
        userTotal=1247,
        runTotal=15420,
        agentTrend="+2 from last month",
        revenueTrend="+12% from last month",
        userTrend="+8% from last month",
        runTrend="+23% from last month",
        recentAgents=[
            RecentAgentRow(
                id="1",
                name="E-commerce Analyzer",
                category="E-commerce",
                status="active",
                runs=1247,
                revenue=Decimal("847.50"),
            ),
            RecentAgentRow(
                id="2",
                name="Social Media Scheduler",
                category="Marketing",
                status="active",
                runs=892,
                revenue=Decimal("456.20"),
            ),
        ],
        recentActivity=[
            ActivityItem(
                id="1",
                kind="agent_run",
                message="E-commerce Analyzer executed successfully",
                timestamp="2 minutes ago",
                outcome="success",
            ),
            ActivityItem(
                id="2",
                kind="payment",
                message="Payment received for Social Media Scheduler",
                timestamp="1 hour ago",
                outcome="success",
            ),
        ],
        performance=PerformanceStats(successRate=98.5, avgResponseSeconds=2.3, avgRating=4.8),
    )


class StaticCatalogProvider:
    """In-process demo catalog. The same summary is served to every user."""

    def __init__(self, listings: tuple[AgentListing, ...] = DEMO_LISTINGS) -> None:
        self._listings = listings

    def list_agents(self, criteria: CatalogFilter) -> list[AgentListing]:
        # Copies: callers must not be able to reach the shared tuple's items
        return [item.model_copy() for item in criteria.apply(list(self._listings))]

    def get_agent(self, agent_id: str) -> AgentListing | None:
        for item in self._listings:
            if item.id == agent_id:
                return item.model_copy()
        return None

    def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        return _demo_summary()


# ── DynamoDB catalog ──────────────────────────────────────────────────────────

def humanize_timestamp(iso: str, now: datetime | None = None) -> str:
    """Render an ISO-8601 timestamp relative to ``now``, e.g. "2 minutes ago"."""
    try:
        then = datetime.fromisoformat(iso)
    except ValueError:
        return iso
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return "just now"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return iso


def _listing_from_item(item: dict[str, Any]) -> AgentListing:
    return AgentListing(
        id=item["agentId"],
        name=item["name"],
        description=item.get("description", ""),
        category=item.get("category", "Other"),
        price=Decimal(str(item.get("price", 0))),
        rating=item.get("rating", 0),
        userCount=item.get("userCount", 0),
        creatorName=item.get("creatorName", ""),
        invocationEndpoint=item.get("invocationEndpoint", ""),
    )


def _agent_row_from_item(item: dict[str, Any]) -> RecentAgentRow:
    status = item.get("status", "draft")
    return RecentAgentRow(
        id=item["agentId"],
        name=item["name"],
        category=item.get("category", "Other"),
        status="active" if status == "published" else status,
        runs=item.get("runs", 0),
        revenue=Decimal(str(item.get("revenue", 0))),
        users=item.get("userCount", 0),
    )


def _activity_from_item(item: dict[str, Any], now: datetime) -> ActivityItem:
    return ActivityItem(
        id=item.get("activityId", item["SK"]),
        kind=item.get("kind", "event"),
        message=item.get("message", ""),
        timestamp=humanize_timestamp(item.get("createdAt", ""), now),
        outcome=item.get("outcome", "success"),
    )


_T = TypeVar("_T")


def _map_row(build: Callable[..., _T], item: dict[str, Any], *args: Any) -> _T | None:
    """Map one stored item; a malformed item is logged and skipped, never fatal."""
    try:
        return build(item, *args)
    except (KeyError, ValidationError, InvalidOperation) as exc:
        logger.warning(
            "catalog.bad_row",
            pk=item.get("PK"),
            sk=item.get("SK"),
            mapper=build.__name__,
            error=str(exc),
        )
        return None


def _created_since(item: dict[str, Any], cutoff: datetime) -> bool:
    try:
        created = datetime.fromisoformat(str(item.get("createdAt", "")))
    except ValueError:
        return False
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created >= cutoff


class DynamoCatalogProvider:

    def __init__(
        self,
        listings: ListingDAO | None = None,
        activity: ActivityDAO | None = None,
    ) -> None:
        settings = get_settings()
        self._listings = listings or ListingDAO()
        self._activity = activity or ActivityDAO()
        self._recent_agents = settings.dashboard_recent_agents
        self._recent_activity = settings.dashboard_recent_activity

    def list_agents(self, criteria: CatalogFilter) -> list[AgentListing]:
        try:
            items = self._listings.list_all_marketplace()
        except (ClientError, BotoCoreError) as exc:
            raise CatalogUnavailable(f"Listing query failed: {exc}") from exc
        listings = [_map_row(_listing_from_item, item) for item in items]
        return criteria.apply([listing for listing in listings if listing is not None])

    def get_agent(self, agent_id: str) -> AgentListing | None:
        try:
            item = self._listings.get(agent_id)
        except (ClientError, BotoCoreError) as exc:
            raise CatalogUnavailable(f"Listing lookup failed: {exc}") from exc
        if not item or item.get("statusVisibility") != "published#public":
            return None
        return _map_row(_listing_from_item, item)

    def get_dashboard_summary(self, user_id: str) -> DashboardSummary:
        try:
            own = self._listings.list_by_creator(user_id)
            events = self._activity.list_recent(user_id, limit=self._recent_activity)
        except (ClientError, BotoCoreError) as exc:
            raise CatalogUnavailable(f"Dashboard query failed: {exc}") from exc

        now = datetime.now(timezone.utc)
        cutoff = now - timedelta(days=30)
        rows: list[RecentAgentRow] = []
        added = 0
        for item in own:
            row = _map_row(_agent_row_from_item, item)
            if row is None:
                continue
            rows.append(row)
            if _created_since(item, cutoff):
                added += 1

        activity = [_map_row(_activity_from_item, event, now) for event in events]
        return DashboardSummary(
            agentCount=len(rows),
            revenueTotal=sum((row.revenue for row in rows), Decimal("0")),
            userTotal=sum(row.users for row in rows),
            runTotal=sum(row.runs for row in rows),
            # Only creation dates are stored; the other tiles carry no trend
            agentTrend=f"+{added} from last month",
            recentAgents=rows[: self._recent_agents],
            recentActivity=[item for item in activity if item is not None],
        )


def build_catalog_provider() -> CatalogProvider:
    if get_settings().catalog_backend == "dynamodb":
        return DynamoCatalogProvider()
    return StaticCatalogProvider()
