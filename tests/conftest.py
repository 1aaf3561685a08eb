"""Shared test fixtures and configuration."""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add sparkle_validator/ to Python path so `from appcast.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "sparkle_validator"))

import pytest

os.environ["SPARKLE_VALIDATOR_DEV_MODE"] = "true"
os.environ["SPARKLE_VALIDATOR_OPTIONS_PATH"] = str(Path(__file__).parent / "no-options.json")

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SPARKLE_NS = "http://www.andymatuschak.org/xml-namespaces/sparkle"

# 64 zero bytes, base64-encoded.
ED_SIGNATURE = "A" * 86 + "=="

FIXED_NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_feed(items: str, channel_extra: str = "", *, namespace: str = SPARKLE_NS) -> str:
    """Wrap item markup in a complete appcast."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<rss version="2.0" xmlns:sparkle="{namespace}">\n'
        "<channel>\n"
        "<title>App</title>\n"
        "<link>https://example.com/</link>\n"
        f"{channel_extra}"
        f"{items}"
        "</channel>\n"
        "</rss>\n"
    )


def make_item(
    version: str = "100",
    *,
    title: str = "Version 1.0",
    pub_date: str = "Mon, 06 May 2024 10:00:00 +0000",
    url: str = "https://example.com/App_1.0.zip",
    length: str = "1024",
    enclosure_attrs: str = "",
    extra: str = "",
    signature: str = ED_SIGNATURE,
) -> str:
    sig = f' sparkle:edSignature="{signature}"' if signature else ""
    return (
        "<item>\n"
        f"<title>{title}</title>\n"
        f"<pubDate>{pub_date}</pubDate>\n"
        f"<sparkle:version>{version}</sparkle:version>\n"
        "<description>Notes</description>\n"
        f"{extra}"
        f'<enclosure url="{url}" length="{length}" type="application/octet-stream"{sig}'
        f"{enclosure_attrs}/>\n"
        "</item>\n"
    )


def ids(result_or_diagnostics) -> list[str]:
    diagnostics = getattr(result_or_diagnostics, "diagnostics", result_or_diagnostics)
    return [d.id for d in diagnostics]


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def valid_feed_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "valid_appcast.xml"


class StubResolver:
    """Resolver returning canned addresses; unknown hosts fail to resolve."""

    def __init__(self, table: dict[str, list[str]] | None = None) -> None:
        self.table = table or {}
        self.calls: list[str] = []

    async def resolve(self, hostname: str) -> list[str] | None:
        self.calls.append(hostname)
        return self.table.get(hostname)
