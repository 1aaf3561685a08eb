"""SSRF guard: decide whether a URL may be requested from this host.

IP literals are classified directly. Hostnames are resolved and refused when
*any* of their addresses is private, since the connection may land on any
of them. A lookup that fails or returns nothing is reported as
``unverifiable`` rather than ``blocked``.
"""

from __future__ import annotations

import ipaddress
import logging
import re
import socket
from urllib.parse import urlsplit

from appcast.remote.models import GuardDecision, GuardVerdict
from appcast.remote.resolver import Resolver
from appcast.validator.constants import ALLOWED_URL_SCHEMES

logger = logging.getLogger(__name__)

_BLOCKED_IPV4_NETWORKS = tuple(
    ipaddress.IPv4Network(cidr)
    for cidr in (
        "0.0.0.0/8",  # "this" network
        "10.0.0.0/8",
        "100.64.0.0/10",  # carrier-grade NAT
        "127.0.0.0/8",
        "169.254.0.0/16",  # link-local, cloud metadata
        "172.16.0.0/12",
        "192.0.0.0/24",
        "192.0.2.0/24",  # TEST-NET-1
        "192.168.0.0/16",
        "198.18.0.0/15",  # benchmarking
        "198.51.100.0/24",  # TEST-NET-2
        "203.0.113.0/24",  # TEST-NET-3
        "224.0.0.0/4",  # multicast
        "240.0.0.0/4",  # reserved
    )
)

_BLOCKED_IPV6_NETWORKS = tuple(
    ipaddress.IPv6Network(cidr) for cidr in ("fe80::/10", "fc00::/7")
)

# The low 32 bits of these carry an IPv4 address (IPv4-compatible, NAT64).
_IPV4_EMBEDDING_NETWORKS = tuple(
    ipaddress.IPv6Network(cidr) for cidr in ("::/96", "64:ff9b::/96")
)

_LOCALHOST_NAMES = frozenset({"localhost", "localhost.localdomain"})

_DOTTED_QUAD_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)\.(\d+)$")
# Decimal, octal or hex parts, 1-4 of them: "2130706433", "0x7f.1", "0177.0.0.1".
_NUMERIC_HOST_RE = re.compile(r"^(0x[0-9a-f]*|\d+)(\.(0x[0-9a-f]*|\d+)){0,3}$", re.IGNORECASE)


def is_private_ipv4(address: str) -> bool:
    quad = _DOTTED_QUAD_RE.match(address)
    if quad and any(int(octet) > 255 for octet in quad.groups()):
        return True
    try:
        ip = ipaddress.IPv4Address(address)
    except ValueError:
        return True
    return any(ip in network for network in _BLOCKED_IPV4_NETWORKS)


def is_private_ipv6(address: str) -> bool:
    try:
        ip = ipaddress.IPv6Address(address.split("%", 1)[0])
    except ValueError:
        return True
    if ip.ipv4_mapped is not None:
        return is_private_ipv4(str(ip.ipv4_mapped))
    if ip.is_loopback or ip.is_unspecified:
        return True
    if ip.sixtofour is not None:
        return is_private_ipv4(str(ip.sixtofour))
    if any(ip in network for network in _IPV4_EMBEDDING_NETWORKS):
        return is_private_ipv4(str(ipaddress.IPv4Address(int(ip) & 0xFFFFFFFF)))
    return any(ip in network for network in _BLOCKED_IPV6_NETWORKS)


def is_private_address(address: str) -> bool:
    """True for any address in a private, internal or reserved range."""
    if ":" in address:
        return is_private_ipv6(address)
    return is_private_ipv4(address)


def normalize_numeric_host(host: str) -> str | None:
    """Dotted-quad form of a numeric IPv4 spelling, or None for a hostname.

    The system resolver accepts ``2130706433`` and ``0x7f.1`` as 127.0.0.1,
    so those are classified like the literal they stand for.
    """
    if _DOTTED_QUAD_RE.match(host) or not _NUMERIC_HOST_RE.match(host):
        return None
    try:
        return socket.inet_ntoa(socket.inet_aton(host))
    except OSError:
        return None


def _is_localhost(host: str) -> bool:
    return host in _LOCALHOST_NAMES or host.endswith(".localhost")


def _blocked(reason: str) -> GuardDecision:
    return GuardDecision(GuardVerdict.blocked, reason)


class SsrfGuard:
    """Classify URLs as allowed, blocked or unverifiable before any request."""

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    async def check(self, url: str) -> GuardDecision:
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError:
            return _blocked("Invalid URL")

        if parts.scheme.lower() not in ALLOWED_URL_SCHEMES:
            return _blocked(f'Unsupported URL scheme "{parts.scheme}"')
        if not host:
            return _blocked("URL has no host")

        host = host.lower().rstrip(".")
        if _is_localhost(host):
            return _blocked("Local/private URL")

        if ":" in host or _DOTTED_QUAD_RE.match(host):
            if is_private_address(host):
                return _blocked("Local/private URL")
            return GuardDecision(GuardVerdict.allowed)

        numeric = normalize_numeric_host(host)
        if numeric is not None:
            if is_private_ipv4(numeric):
                return _blocked(f"Local/private URL ({host} is {numeric})")
            return GuardDecision(GuardVerdict.allowed)

        addresses = await self._resolver.resolve(host)
        if not addresses:
            logger.info("Could not resolve %s; skipping", host)
            return GuardDecision(GuardVerdict.unverifiable, f'Could not resolve hostname "{host}"')

        for address in addresses:
            if is_private_address(address):
                logger.info("%s resolves to private address %s; skipping", host, address)
                return _blocked(f"Hostname resolves to private IP address ({address})")
        return GuardDecision(GuardVerdict.allowed)
