"""
Access guard — decides whether a page may be assembled for a session.

guard() is total: every (session, requirement) pair maps to exactly one
outcome and nothing is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Union

from xeinst.models.session import Authenticated, Session

SIGNIN_PATH = "/auth/signin"


class PageRequirement(StrEnum):
    PUBLIC = "public"
    REQUIRES_AUTH = "requires_auth"


@dataclass(frozen=True)
class Proceed:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str


GuardOutcome = Union[Proceed, RedirectTo]

PROCEED = Proceed()

# Page routes and what they require.
PAGE_REQUIREMENTS: dict[str, PageRequirement] = {
    "/": PageRequirement.PUBLIC,
    "/explore": PageRequirement.PUBLIC,
    "/explore/{agent_id}": PageRequirement.PUBLIC,
    "/dashboard": PageRequirement.REQUIRES_AUTH,
    "/auth/signin": PageRequirement.PUBLIC,
    "/auth/verify-request": PageRequirement.PUBLIC,
    "/success": PageRequirement.PUBLIC,
    "/cancel": PageRequirement.PUBLIC,
}


def guard(session: Session, requirement: PageRequirement) -> GuardOutcome:
    if requirement == PageRequirement.REQUIRES_AUTH and not isinstance(session, Authenticated):
        return RedirectTo(SIGNIN_PATH)
    return PROCEED
