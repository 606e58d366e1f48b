"""
Page router — mounted at /

Every page follows the same pipeline:

    resolve session → access guard → assemble view model → render

Public pages that need catalog data resolve the session and fetch from the
catalog concurrently.  The gated dashboard resolves and guards first; the
catalog is never called for an anonymous visitor.

Providers are synchronous (boto3), so their calls run in the thread pool.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from xeinst.api.deps import AssemblerDep, RendererDep, RequestCtx, SessionResolverDep
from xeinst.core.config import get_settings
from xeinst.models.catalog import ALL_CATEGORIES
from xeinst.models.session import RequestContext, Session
from xeinst.models.views import Page
from xeinst.render.renderer import Renderer
from xeinst.services.access_guard import PAGE_REQUIREMENTS, RedirectTo, guard
from xeinst.services.session_service import SessionResolver

router = APIRouter()

MAX_CATEGORY_LENGTH = 64
MAX_SEARCH_LENGTH = 200


def _html(renderer: Renderer, page: Page) -> HTMLResponse:
    return HTMLResponse(renderer.render(page), status_code=page.statusCode)


def _redirect_for(route: str, session: Session) -> RedirectResponse | None:
    outcome = guard(session, PAGE_REQUIREMENTS[route])
    if isinstance(outcome, RedirectTo):
        return RedirectResponse(outcome.path, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return None


async def _resolve(resolver: SessionResolver, ctx: RequestContext) -> Session:
    return await run_in_threadpool(resolver.resolve, ctx)


# ── GET /  ────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse, summary="Landing page")
async def landing(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/", session):
        return redirect
    return _html(renderer, assembler.page(session, "AI Agents Marketplace", assembler.landing()))


# ── GET /explore  ─────────────────────────────────────────────────────────────

@router.get("/explore", response_class=HTMLResponse, summary="Browse agents")
async def explore(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
    category: str = ALL_CATEGORIES,
    q: Annotated[str | None, Query(description="Search term")] = None,
) -> Response:
    """
    Filter by exact category (or "All") and a case-insensitive search term
    matched against agent name and description.  Overlong input is truncated,
    not rejected, so the page still renders.
    """
    session, view = await asyncio.gather(
        _resolve(resolver, ctx),
        run_in_threadpool(
            assembler.explore,
            category[:MAX_CATEGORY_LENGTH],
            q[:MAX_SEARCH_LENGTH] if q else q,
        ),
    )
    if redirect := _redirect_for("/explore", session):
        return redirect
    return _html(renderer, assembler.page(session, "Explore AI Agents", view))


# ── GET /explore/{agent_id}  ──────────────────────────────────────────────────

@router.get("/explore/{agent_id}", response_class=HTMLResponse, summary="Agent detail")
async def agent_detail(
    agent_id: str,
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    """Returns 404 with an empty-state page for unknown or unpublished agents."""
    session, view = await asyncio.gather(
        _resolve(resolver, ctx),
        run_in_threadpool(assembler.agent_detail, agent_id),
    )
    if redirect := _redirect_for("/explore/{agent_id}", session):
        return redirect
    title = view.agent.name if view.agent else "Agent"
    status_code = status.HTTP_404_NOT_FOUND if view.notFound else status.HTTP_200_OK
    return _html(renderer, assembler.page(session, title, view, status_code))


# ── GET /dashboard  ───────────────────────────────────────────────────────────

@router.get("/dashboard", response_class=HTMLResponse, summary="Dashboard")
async def dashboard(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    """Gated: anonymous visitors are redirected to /auth/signin before any fetch."""
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/dashboard", session):
        return redirect
    view = await run_in_threadpool(assembler.dashboard, session)
    return _html(renderer, assembler.page(session, "Dashboard", view))


# ── Auth notices  ─────────────────────────────────────────────────────────────

@router.get("/auth/signin", response_class=HTMLResponse, summary="Sign-in prompt")
async def sign_in(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/auth/signin", session):
        return redirect
    return _html(renderer, assembler.page(session, "Sign in", assembler.sign_in()))


@router.get("/auth/verify-request", response_class=HTMLResponse, summary="Magic link sent")
async def verify_request(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/auth/verify-request", session):
        return redirect
    return _html(renderer, assembler.page(session, "Check your email", assembler.verify_request()))


@router.post("/auth/signout", summary="Sign out")
async def sign_out(ctx: RequestCtx, resolver: SessionResolverDep) -> RedirectResponse:
    """
    Invalidate the current session and go back to the landing page.
    Idempotent: signing out while anonymous just redirects.
    """
    session = await _resolve(resolver, ctx)
    await run_in_threadpool(resolver.sign_out, session)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(get_settings().session_cookie_name)
    return response


# ── Payment results  ──────────────────────────────────────────────────────────

@router.get("/success", response_class=HTMLResponse, summary="Payment succeeded")
async def payment_success(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/success", session):
        return redirect
    return _html(renderer, assembler.page(session, "Payment Successful", assembler.success()))


@router.get("/cancel", response_class=HTMLResponse, summary="Payment cancelled")
async def payment_cancel(
    ctx: RequestCtx,
    resolver: SessionResolverDep,
    assembler: AssemblerDep,
    renderer: RendererDep,
) -> Response:
    session = await _resolve(resolver, ctx)
    if redirect := _redirect_for("/cancel", session):
        return redirect
    return _html(renderer, assembler.page(session, "Payment Cancelled", assembler.cancel()))
