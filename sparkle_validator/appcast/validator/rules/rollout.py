"""Phased rollout rules."""

from __future__ import annotations

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document
from appcast.validator.constants import (
    NON_NEGATIVE_INT_RE,
    PUB_DATE,
    SPARKLE_PHASED_ROLLOUT_INTERVAL,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report


def check_rollout(document: Document, sink: list[Diagnostic]) -> None:
    """E020, E021."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    for item in items:
        rollout_el = sparkle_child_element(item, SPARKLE_PHASED_ROLLOUT_INTERVAL)
        if rollout_el is None:
            continue

        value = text_content(rollout_el).strip()
        if not NON_NEGATIVE_INT_RE.match(value):
            report(
                sink,
                "E020",
                f'sparkle:phasedRolloutInterval "{value}" is not a valid non-negative integer',
                rollout_el,
                fix="Set to an integer representing seconds (e.g., 86400 for 1 day)",
            )

        # Sparkle measures rollout groups from the publication date.
        pub_date_el = child_element(item, PUB_DATE)
        if pub_date_el is None or not text_content(pub_date_el).strip():
            report(
                sink,
                "E021",
                "Phased rollout requires a <pubDate> on the item",
                rollout_el,
                fix="Add a <pubDate> element to this item",
            )
