"""Publication date rules."""

from __future__ import annotations

from datetime import datetime, timezone

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    EARLIEST_PLAUSIBLE_PUB_DATE,
    PUB_DATE,
    PUB_DATE_FUTURE_SKEW,
    SPARKLE_CHANNEL,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report
from appcast.validator.timestamps import parse_rfc2822_date
from appcast.validator.versions import (
    compare_versions,
    is_numeric_version,
    resolve_item_version,
)

_RFC2822_EXAMPLE = "Thu, 13 Jul 2023 14:30:00 -0700"


def _check_order(items: list[Element], sink: list[Diagnostic]) -> None:
    """W018: default-channel items should run from newest to oldest version.

    Items on a named ``<sparkle:channel>`` are not part of the ordering.
    """
    versioned: list[tuple[Element, str]] = []
    for item in items:
        if sparkle_child_element(item, SPARKLE_CHANNEL) is not None:
            continue
        version = resolve_item_version(item).effective
        if version and is_numeric_version(version):
            versioned.append((item, version))

    for (_, previous), (item, version) in zip(versioned, versioned[1:]):
        if compare_versions(version, previous) > 0:
            report(
                sink,
                "W018",
                f'Items are not sorted by version in descending order: "{version}" '
                f'appears after "{previous}"',
                item,
                fix="Sort <item> elements so the newest release appears first",
            )
            return


def check_dates(
    document: Document,
    sink: list[Diagnostic],
    now: datetime | None = None,
) -> None:
    """W003, W004, W018, W031, W032.

    ``now`` pins the clock for the future-date check; defaults to UTC now.
    """
    channel, items = channel_and_items(document)
    if channel is None:
        return
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    for item in items:
        pub_date_el = child_element(item, PUB_DATE)
        if pub_date_el is None:
            report(
                sink,
                "W003",
                "Item is missing <pubDate>",
                item,
                fix=f"Add a <pubDate> element with an RFC 2822 date (e.g., {_RFC2822_EXAMPLE})",
            )
            continue

        value = text_content(pub_date_el).strip()
        if not value:
            report(
                sink,
                "W003",
                "Item has empty <pubDate>",
                pub_date_el,
                fix="Set the <pubDate> content to an RFC 2822 date",
            )
            continue

        parsed = parse_rfc2822_date(value)
        if parsed is None:
            report(
                sink,
                "W004",
                f'<pubDate> "{value}" is not in RFC 2822 format',
                pub_date_el,
                fix=(
                    "Use RFC 2822 format: Day, DD Mon YYYY HH:MM:SS +ZZZZ "
                    f"(e.g., {_RFC2822_EXAMPLE})"
                ),
            )
            continue

        if parsed > now + PUB_DATE_FUTURE_SKEW:
            report(
                sink,
                "W031",
                f'<pubDate> "{value}" is in the future',
                pub_date_el,
                fix="Check the date and time zone offset of the release",
            )
        elif parsed < EARLIEST_PLAUSIBLE_PUB_DATE:
            report(
                sink,
                "W032",
                f'<pubDate> "{value}" predates Sparkle itself and is probably wrong',
                pub_date_el,
                fix="Check the year of the release date",
            )

    _check_order(items, sink)
