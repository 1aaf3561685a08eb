"""Read an appcast from a file, stdin or a URL."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import httpx

from appcast.remote.models import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/xml, text/xml, application/rss+xml, */*"


class SourceError(Exception):
    """The feed could not be read."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def read_file(source: str) -> str:
    path = Path(source).resolve()
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SourceError(f"File not found: {path}") from e
    except IsADirectoryError as e:
        raise SourceError(f"Path is a directory: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Could not read {path}: {e}") from e


def read_stdin() -> str:
    return sys.stdin.read()


async def fetch_url(
    url: str,
    client: httpx.AsyncClient,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    logger.debug("Fetching %s", url)
    try:
        resp = await client.get(
            url,
            headers={"Accept": FEED_ACCEPT, "User-Agent": user_agent},
            follow_redirects=True,
        )
    except httpx.HTTPError as e:
        raise SourceError(f"Fetch failed: {e}") from e
    if resp.is_error:
        raise SourceError(f"HTTP {resp.status_code}: {resp.reason_phrase}")
    return resp.text


async def read_source(
    source: str,
    client: httpx.AsyncClient,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """``-`` is stdin, http(s) URLs are fetched, anything else is a path."""
    if source == "-":
        return read_stdin()
    if is_url(source):
        return await fetch_url(source, client, user_agent)
    return read_file(source)
