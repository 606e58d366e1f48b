"""
Exception taxonomy for the page layer.

Only provider failures are modelled as exceptions.  A missing session on a
gated page is an ordinary ``RedirectTo`` outcome of the access guard, and an
unknown agent id is a ``None`` lookup that the assembler turns into an empty
state.  Neither ever surfaces as an error to the user.
"""

from __future__ import annotations


class XeinstError(Exception):
    """Base class for all application errors."""

    error_code: str = "XEINST_ERROR"


class ProviderUnavailable(XeinstError):
    """An external collaborator (identity or catalog) could not serve a call."""

    error_code = "PROVIDER_UNAVAILABLE"

    def __init__(self, message: str, *, provider: str) -> None:
        self.provider = provider
        super().__init__(message)


class IdentityUnavailable(ProviderUnavailable):
    error_code = "IDENTITY_UNAVAILABLE"

    def __init__(self, message: str) -> None:
        super().__init__(message, provider="identity")


class CatalogUnavailable(ProviderUnavailable):
    error_code = "CATALOG_UNAVAILABLE"

    def __init__(self, message: str) -> None:
        super().__init__(message, provider="catalog")
