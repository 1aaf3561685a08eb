"""macOS version range and hardware requirement rules."""

from __future__ import annotations

from appcast.document.helpers import channel_and_items, sparkle_child_element, text_content
from appcast.document.models import Document
from appcast.validator.constants import (
    KNOWN_ARCHITECTURES,
    MACOS_VERSION_RE,
    SPARKLE_HARDWARE_REQUIREMENTS,
    SPARKLE_MAXIMUM_SYSTEM_VERSION,
    SPARKLE_MINIMUM_SYSTEM_VERSION,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report
from appcast.validator.versions import compare_versions

_OS_VERSION_FIX = "Use a version format like 10.13, 11.0, or 14.0"


def split_architectures(value: str) -> list[str]:
    """``"arm64, x86_64"`` or ``"arm64 x86_64"`` -> ``["arm64", "x86_64"]``."""
    return [part for part in value.replace(",", " ").split() if part]


def check_system_requirements(document: Document, sink: list[Diagnostic]) -> None:
    """W011, W012, W013, W037."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    for item in items:
        min_el = sparkle_child_element(item, SPARKLE_MINIMUM_SYSTEM_VERSION)
        max_el = sparkle_child_element(item, SPARKLE_MAXIMUM_SYSTEM_VERSION)
        min_version = text_content(min_el).strip() if min_el is not None else ""
        max_version = text_content(max_el).strip() if max_el is not None else ""

        if min_version and not MACOS_VERSION_RE.match(min_version):
            report(
                sink,
                "W011",
                f'minimumSystemVersion "{min_version}" is not a valid macOS version format',
                min_el,
                fix=_OS_VERSION_FIX,
            )
        if max_version and not MACOS_VERSION_RE.match(max_version):
            report(
                sink,
                "W012",
                f'maximumSystemVersion "{max_version}" is not a valid macOS version format',
                max_el,
                fix=_OS_VERSION_FIX,
            )
        if (
            min_version
            and max_version
            and MACOS_VERSION_RE.match(min_version)
            and MACOS_VERSION_RE.match(max_version)
            and compare_versions(min_version, max_version) > 0
        ):
            report(
                sink,
                "W013",
                f"minimumSystemVersion ({min_version}) is greater than "
                f"maximumSystemVersion ({max_version})",
                min_el,
                fix="Swap the values or correct the version requirements",
            )

        hardware_el = sparkle_child_element(item, SPARKLE_HARDWARE_REQUIREMENTS)
        if hardware_el is not None:
            unknown = [
                arch
                for arch in split_architectures(text_content(hardware_el))
                if arch not in KNOWN_ARCHITECTURES
            ]
            if unknown:
                report(
                    sink,
                    "W037",
                    f"Unknown architecture in sparkle:hardwareRequirements: {', '.join(unknown)}",
                    hardware_el,
                    fix=f"Use one of: {', '.join(sorted(KNOWN_ARCHITECTURES))}",
                )
