"""
Pydantic schemas for the per-request session.

A Session is either ``Anonymous`` or ``Authenticated``.  Both are frozen:
they are created once per request by the identity provider and passed
explicitly through every render call.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Role(StrEnum):
    CREATOR = "CREATOR"
    CONSUMER = "CONSUMER"


class Anonymous(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["anonymous"] = "anonymous"


class Authenticated(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["authenticated"] = "authenticated"
    userId: str
    displayName: str | None = None
    email: str = ""
    role: Role = Role.CONSUMER

    @property
    def label(self) -> str:
        """Name shown in greetings: display name, falling back to email."""
        return self.displayName or self.email or self.userId


Session = Union[Anonymous, Authenticated]

ANONYMOUS = Anonymous()


class RequestContext(BaseModel):
    """
    Opaque credential carrier for one request.

    The page layer copies these values out of the HTTP request unexamined;
    only an identity provider interprets them.
    """
    model_config = ConfigDict(frozen=True)

    authorization: str | None = None
    cookies: dict[str, str] = Field(default_factory=dict)
