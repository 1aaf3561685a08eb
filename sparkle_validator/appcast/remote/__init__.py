"""Remote URL verification for appcast feeds."""

from appcast.remote.models import GuardDecision, GuardVerdict, RemoteOptions, UrlTarget
from appcast.remote.ssrf import SsrfGuard
from appcast.remote.verifier import RemoteVerifier, verify_remote

__all__ = [
    "GuardDecision",
    "GuardVerdict",
    "RemoteOptions",
    "RemoteVerifier",
    "SsrfGuard",
    "UrlTarget",
    "verify_remote",
]
