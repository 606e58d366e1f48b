"""
FastAPI dependency functions shared across all route modules.

Providers are resolved through dependencies so tests (and alternative
deployments) can swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from xeinst.models.session import RequestContext
from xeinst.providers.catalog import CatalogProvider, build_catalog_provider
from xeinst.providers.identity import CognitoIdentityProvider, IdentityProvider
from xeinst.render.renderer import Renderer
from xeinst.services.session_service import SessionResolver
from xeinst.services.view_models import ViewModelAssembler


def get_request_context(request: Request) -> RequestContext:
    """Copy the credential-bearing parts of the request, unexamined."""
    return RequestContext(
        authorization=request.headers.get("authorization"),
        cookies=dict(request.cookies),
    )


def get_identity_provider() -> IdentityProvider:
    return CognitoIdentityProvider()


def get_catalog_provider() -> CatalogProvider:
    return build_catalog_provider()


def get_session_resolver(
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> SessionResolver:
    return SessionResolver(identity)


def get_assembler(
    catalog: Annotated[CatalogProvider, Depends(get_catalog_provider)],
) -> ViewModelAssembler:
    return ViewModelAssembler(catalog)


@lru_cache
def get_renderer() -> Renderer:
    # Template environment is immutable once built; share it across requests
    return Renderer()


# ── Convenient type aliases for route signatures ───────────────────────────────

RequestCtx = Annotated[RequestContext, Depends(get_request_context)]
SessionResolverDep = Annotated[SessionResolver, Depends(get_session_resolver)]
AssemblerDep = Annotated[ViewModelAssembler, Depends(get_assembler)]
RendererDep = Annotated[Renderer, Depends(get_renderer)]
