"""
ViewModelAssembler — builds the display model for each page.

Responsibilities:
  - Combine the resolved session with catalog data into inert view models
  - Compute capability flags (isCreator) once, so templates stay logic-free
  - Convert every catalog failure into a degraded view with a notice

The assembler is read-only: it never mutates provider state.  It expects
the access guard to have run already; dashboard() refuses an anonymous
session outright rather than fetching anything for it.
"""

from __future__ import annotations

from xeinst.core.config import get_settings
from xeinst.core.logging import get_logger
from xeinst.models.catalog import (
    ALL_CATEGORIES,
    KNOWN_CATEGORIES,
    CatalogFilter,
    DashboardSummary,
)
from xeinst.models.session import Authenticated, Role, Session
from xeinst.models.views import (
    AgentDetailView,
    DashboardView,
    ExploreView,
    FeatureCard,
    LandingView,
    Link,
    NavigationView,
    NoticeView,
    Page,
    PageContent,
    StatTile,
    UserMenu,
    money,
)
from xeinst.providers.catalog import CatalogProvider
from xeinst.services.access_guard import SIGNIN_PATH

logger = get_logger(__name__)

CATALOG_NOTICE = "The agent catalog is temporarily unavailable. Please try again shortly."
DASHBOARD_NOTICE = "Your dashboard figures are temporarily unavailable. Please try again shortly."

_FEATURES = [
    FeatureCard(
        title="Lightning Fast",
        description="Execute AI agents instantly with webhook-based architecture",
        icon="zap",
    ),
    FeatureCard(
        title="Secure & Reliable",
        description="Enterprise-grade security with HMAC verification and role-based access",
        icon="shield",
    ),
    FeatureCard(
        title="Creator Economy",
        description="Monetize your AI agents with Stripe Connect integration",
        icon="users",
    ),
    FeatureCard(
        title="Global Marketplace",
        description="Discover agents from creators worldwide with category filtering",
        icon="globe",
    ),
    FeatureCard(
        title="Premium Quality",
        description="Curated agents with detailed descriptions and usage examples",
        icon="star",
    ),
    FeatureCard(
        title="Easy Integration",
        description="Simple webhook endpoints for seamless agent execution",
        icon="arrow-right",
    ),
]


class ViewModelAssembler:

    def __init__(self, catalog: CatalogProvider) -> None:
        self._catalog = catalog
        self._settings = get_settings()

    # ── Chrome ────────────────────────────────────────────────────────────────

    def navigation(self, session: Session) -> NavigationView:
        links = [Link(label="Explore", href="/explore")]
        if isinstance(session, Authenticated):
            links.append(Link(label="Dashboard", href="/dashboard"))
            return NavigationView(
                brand=self._settings.app_name,
                badge="v1",
                links=links,
                user=UserMenu(
                    displayName=session.displayName or "",
                    email=session.email,
                    links=[Link(label="Dashboard", href="/dashboard")],
                ),
            )
        return NavigationView(
            brand=self._settings.app_name,
            badge="v1",
            links=links,
            authLinks=[
                Link(label="Sign in", href=SIGNIN_PATH, variant="ghost"),
                Link(label="Get Started", href=SIGNIN_PATH),
            ],
        )

    def page(self, session: Session, title: str, content: PageContent, status_code: int = 200) -> Page:
        return Page(
            title=f"{title} · {self._settings.app_name}",
            nav=self.navigation(session),
            content=content,
            statusCode=status_code,
        )

    # ── Public pages ──────────────────────────────────────────────────────────

    def landing(self) -> LandingView:
        return LandingView(
            badge="🚀 AI Agents Marketplace",
            headline=f"{self._settings.app_name} v1",
            tagline=(
                "The ultimate marketplace for AI agents. Create, discover, and monetize "
                "intelligent automation solutions that transform how businesses operate."
            ),
            heroActions=[
                Link(label="Explore Agents", href="/explore"),
                Link(label="Get Started", href=SIGNIN_PATH, variant="outline"),
            ],
            features=list(_FEATURES),
            categories=list(KNOWN_CATEGORIES),
            ctaHeadline="Ready to Transform Your Business?",
            ctaTagline="Join thousands of creators and businesses using AI agents",
            ctaActions=[
                Link(label="Start Creating", href=SIGNIN_PATH, variant="secondary"),
                Link(label="Browse Agents", href="/explore", variant="outline"),
            ],
        )

    def explore(self, category: str = ALL_CATEGORIES, search_term: str | None = None) -> ExploreView:
        criteria = CatalogFilter(category=category or ALL_CATEGORIES, searchTerm=search_term)
        categories = [ALL_CATEGORIES, *KNOWN_CATEGORIES]
        try:
            agents = self._catalog.list_agents(criteria)
        except Exception as exc:
            logger.warning("catalog.unavailable", page="explore", error=str(exc))
            return ExploreView(
                categories=categories,
                selectedCategory=criteria.category,
                searchTerm=search_term or "",
                unavailable=True,
                notice=CATALOG_NOTICE,
            )
        return ExploreView(
            agents=agents,
            categories=categories,
            selectedCategory=criteria.category,
            searchTerm=search_term or "",
        )

    def agent_detail(self, agent_id: str) -> AgentDetailView:
        try:
            agent = self._catalog.get_agent(agent_id)
        except Exception as exc:
            logger.warning("catalog.unavailable", page="agent_detail", agent_id=agent_id, error=str(exc))
            return AgentDetailView(agentId=agent_id, unavailable=True, notice=CATALOG_NOTICE)
        if agent is None:
            return AgentDetailView(agentId=agent_id, notFound=True)
        return AgentDetailView(agentId=agent_id, agent=agent)

    # ── Gated pages ───────────────────────────────────────────────────────────

    def dashboard(self, session: Session) -> DashboardView:
        if not isinstance(session, Authenticated):
            raise ValueError("dashboard requires an authenticated session")

        is_creator = session.role == Role.CREATOR
        try:
            summary = self._catalog.get_dashboard_summary(session.userId)
        except Exception as exc:
            logger.warning("catalog.unavailable", page="dashboard", user_id=session.userId, error=str(exc))
            return DashboardView(
                greetingName=session.label,
                stats=self._stat_tiles(DashboardSummary()),
                isCreator=is_creator,
                unavailable=True,
                notice=DASHBOARD_NOTICE,
            )
        return DashboardView(
            greetingName=session.label,
            stats=self._stat_tiles(summary),
            isCreator=is_creator,
            recentAgents=summary.recentAgents,
            recentActivity=summary.recentActivity,
            performance=summary.performance,
        )

    @staticmethod
    def _stat_tiles(summary: DashboardSummary) -> list[StatTile]:
        return [
            StatTile(
                title="Total Agents",
                value=f"{summary.agentCount:,}",
                trend=summary.agentTrend,
                icon="zap",
            ),
            StatTile(
                title="Total Revenue",
                value=money(summary.revenueTotal),
                trend=summary.revenueTrend,
                icon="dollar-sign",
            ),
            StatTile(
                title="Active Users",
                value=f"{summary.userTotal:,}",
                trend=summary.userTrend,
                icon="users",
            ),
            StatTile(
                title="Total Runs",
                value=f"{summary.runTotal:,}",
                trend=summary.runTrend,
                icon="activity",
            ),
        ]

    # ── Fixed notice pages ────────────────────────────────────────────────────

    def _support_link(self) -> Link:
        email = self._settings.support_email
        return Link(label=email, href=f"mailto:{email}")

    def success(self) -> NoticeView:
        return NoticeView(
            tone="success",
            heading="Payment Successful!",
            subheading="Your AI agent subscription is now active",
            cardTitle=f"Welcome to {self._settings.app_name}!",
            cardDescription=(
                "You now have access to powerful AI agents. "
                "Start exploring and automating your workflows."
            ),
            bulletsTitle="What you can do now:",
            bullets=[
                "Execute AI agents via webhooks",
                "Access your dashboard",
                "View usage analytics",
                "Manage your subscriptions",
            ],
            actions=[
                Link(label="Go to Dashboard", href="/dashboard"),
                Link(label="Explore More Agents", href="/explore", variant="outline"),
            ],
            footer="Need help getting started? Check out our",
            footerLink=Link(label="documentation", href="/docs"),
            footerTail="or contact support.",
        )

    def cancel(self) -> NoticeView:
        return NoticeView(
            tone="warning",
            heading="Payment Cancelled",
            subheading="Your payment was not completed",
            cardTitle="No worries!",
            cardDescription="You can try again anytime. Your account and preferences are saved.",
            bulletsTitle="What happened:",
            bullets=[
                "Payment was cancelled or failed",
                "No charges were made to your account",
                "You can try again whenever you're ready",
                "Contact support if you need help",
            ],
            actions=[
                Link(label="Try Again", href="/explore"),
                Link(label="Back to Home", href="/", variant="outline"),
            ],
            footer="Having trouble? Contact our support team at",
            footerLink=self._support_link(),
        )

    def verify_request(self) -> NoticeView:
        return NoticeView(
            tone="info",
            heading="Check your email",
            subheading="We've sent you a magic link to sign in",
            cardTitle="Magic link sent!",
            cardDescription=(
                "We've sent a secure sign-in link to your email address. "
                "Click the link in your email to access your account."
            ),
            bulletsTitle="Next steps:",
            bullets=[
                "Check your email inbox (and spam folder)",
                f'Click the "Sign in to {self._settings.app_name}" link',
                "You'll be automatically signed in",
                "No password required!",
            ],
            note="Didn't receive the email? Check your spam folder or try again.",
            actions=[
                Link(label="Back to Sign In", href=SIGNIN_PATH, variant="outline"),
                Link(label="Go Home", href="/"),
            ],
            footer="Need help? Contact our support team at",
            footerLink=self._support_link(),
        )

    def sign_in(self) -> NoticeView:
        continue_href = self._settings.signin_url or "/auth/verify-request"
        return NoticeView(
            tone="info",
            heading=f"Sign in to {self._settings.app_name}",
            subheading="Create, discover, and monetize AI agents",
            cardTitle="Welcome",
            cardDescription="Sign in with your email address. No password required.",
            actions=[
                Link(label="Continue with email", href=continue_href),
                Link(label="Go Home", href="/", variant="outline"),
            ],
            footer="Need help? Contact our support team at",
            footerLink=self._support_link(),
        )
