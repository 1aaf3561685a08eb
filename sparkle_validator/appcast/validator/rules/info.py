"""Informational notices about what the feed contains.

Per-item notices (I002-I004) point at the element they describe. The
summaries (I001, I005, I009, I010) are emitted at most once per document.
"""

from __future__ import annotations

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    child_elements,
    sparkle_attr,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ATTR_OS,
    DEFAULT_OS,
    ENCLOSURE,
    MACOS_VERSION_RE,
    NON_NEGATIVE_INT_RE,
    SECONDS_PER_DAY,
    SPARKLE_CHANNEL,
    SPARKLE_CRITICAL_UPDATE,
    SPARKLE_DELTAS,
    SPARKLE_HARDWARE_REQUIREMENTS,
    SPARKLE_MINIMUM_SYSTEM_VERSION,
    SPARKLE_PHASED_ROLLOUT_INTERVAL,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import plural, report
from appcast.validator.rules.system_requirements import split_architectures
from appcast.validator.versions import compare_versions


def _rollout_message(value: str) -> str:
    days = 0
    if NON_NEGATIVE_INT_RE.match(value):
        days = round(int(value) / SECONDS_PER_DAY)
    if days > 0:
        return f"Item uses phased rollout over ~{plural(days, 'day')}"
    return "Item uses phased rollout"


def _summary_message(item_count: int, channel_names: list[str]) -> str:
    message = f"Found {plural(item_count, 'item')}"
    if channel_names:
        total = len(channel_names) + 1
        message += f" across {total} channels (default, {', '.join(channel_names)})"
    return message


def check_info(document: Document, sink: list[Diagnostic]) -> None:
    """I001-I005, I009, I010."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    channel_names: list[str] = []
    platforms: list[str] = []
    first_platform_el: Element | None = None
    min_versions: list[str] = []
    first_min_el: Element | None = None
    architectures: list[str] = []
    first_hardware_el: Element | None = None

    for item in items:
        channel_el = sparkle_child_element(item, SPARKLE_CHANNEL)
        if channel_el is not None:
            name = text_content(channel_el).strip()
            if name and name not in channel_names:
                channel_names.append(name)

        deltas = sparkle_child_element(item, SPARKLE_DELTAS)
        if deltas is not None:
            count = len(child_elements(deltas, ENCLOSURE))
            if count:
                report(sink, "I002", f"Item contains {plural(count, 'delta update')}", deltas)

        rollout_el = sparkle_child_element(item, SPARKLE_PHASED_ROLLOUT_INTERVAL)
        if rollout_el is not None:
            report(sink, "I003", _rollout_message(text_content(rollout_el).strip()), rollout_el)

        critical_el = sparkle_child_element(item, SPARKLE_CRITICAL_UPDATE)
        if critical_el is not None:
            report(sink, "I004", "Item is marked as a critical update", critical_el)

        enclosure = child_element(item, ENCLOSURE)
        if enclosure is not None:
            os_name = (sparkle_attr(enclosure, ATTR_OS) or "").strip()
            if os_name and os_name.lower() != DEFAULT_OS:
                if os_name not in platforms:
                    platforms.append(os_name)
                if first_platform_el is None:
                    first_platform_el = enclosure

        min_el = sparkle_child_element(item, SPARKLE_MINIMUM_SYSTEM_VERSION)
        if min_el is not None:
            value = text_content(min_el).strip()
            if MACOS_VERSION_RE.match(value):
                min_versions.append(value)
                if first_min_el is None:
                    first_min_el = min_el

        hardware_el = sparkle_child_element(item, SPARKLE_HARDWARE_REQUIREMENTS)
        if hardware_el is not None:
            for arch in split_architectures(text_content(hardware_el)):
                if arch not in architectures:
                    architectures.append(arch)
            if first_hardware_el is None:
                first_hardware_el = hardware_el

    if items:
        report(sink, "I001", _summary_message(len(items), channel_names), channel)

    if platforms:
        quoted = ", ".join(f'"{name}"' for name in platforms)
        report(sink, "I005", f"Feed targets non-macOS platforms: {quoted}", first_platform_el)

    if min_versions:
        lowest = min_versions[0]
        highest = min_versions[0]
        for value in min_versions[1:]:
            if compare_versions(value, lowest) < 0:
                lowest = value
            if compare_versions(value, highest) > 0:
                highest = value
        if lowest == highest:
            message = f"All items with a minimum system version require macOS {lowest} or later"
        else:
            message = f"Minimum system versions range from macOS {lowest} to {highest}"
        report(sink, "I009", message, first_min_el)

    if architectures:
        report(
            sink,
            "I010",
            f"Feed declares hardware requirements: {', '.join(architectures)}",
            first_hardware_el,
        )
