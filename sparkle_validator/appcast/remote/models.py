"""Remote verification data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from appcast.document.models import Element

DEFAULT_USER_AGENT = "sparkle-validator/1.1"


class RemoteOptions(BaseModel):
    """Tuning for the remote URL checks."""

    timeout_ms: int = Field(default=10_000, gt=0)
    concurrency: int = Field(default=5, ge=1)
    user_agent: str = DEFAULT_USER_AGENT
    max_redirects: int = Field(default=5, ge=0)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class UrlTarget:
    """A URL found in the feed, with the size it claims and where it came from."""

    url: str
    declared_length: int | None
    element: Element


class GuardVerdict(str, Enum):
    allowed = "allowed"
    blocked = "blocked"
    unverifiable = "unverifiable"


@dataclass(frozen=True)
class GuardDecision:
    verdict: GuardVerdict
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.verdict == GuardVerdict.allowed


@dataclass
class ProbeOutcome:
    """What happened when one target was probed.

    ``decision`` is set when the guard refused the URL (or a redirect hop);
    in that case no request was made for it.
    """

    target: UrlTarget
    decision: GuardDecision | None = None
    status: int | None = None
    content_length: int | None = None
    error: str | None = None
    final_url: str | None = None

    @property
    def skipped(self) -> bool:
        return self.decision is not None and not self.decision.allowed

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.status is not None and 200 <= self.status < 300

    @property
    def redirected(self) -> bool:
        return self.final_url is not None and self.final_url != self.target.url
