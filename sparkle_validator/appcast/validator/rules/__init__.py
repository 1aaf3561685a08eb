"""Rule modules, in execution order."""

from __future__ import annotations

from datetime import datetime
from functools import partial

from appcast.validator.rules.best_practices import check_best_practices
from appcast.validator.rules.channels import check_channels
from appcast.validator.rules.common import Rule
from appcast.validator.rules.dates import check_dates
from appcast.validator.rules.enclosure import check_enclosures
from appcast.validator.rules.info import check_info
from appcast.validator.rules.release_notes import check_release_notes
from appcast.validator.rules.rollout import check_rollout
from appcast.validator.rules.signatures import check_signatures
from appcast.validator.rules.structure import check_structure, halts_pipeline
from appcast.validator.rules.system_requirements import check_system_requirements
from appcast.validator.rules.urls import check_urls
from appcast.validator.rules.version import check_versions
from appcast.validator.rules.xml_format import check_xml_format


def build_rules(now: datetime | None = None) -> list[Rule]:
    """Return every rule in order. Structure always comes first.

    ``now`` is handed to the date rules so results can be reproduced.
    """
    return [
        check_structure,
        check_versions,
        check_enclosures,
        check_signatures,
        partial(check_dates, now=now),
        check_urls,
        check_system_requirements,
        check_release_notes,
        check_channels,
        check_rollout,
        check_best_practices,
        check_xml_format,
        check_info,
    ]


__all__ = ["Rule", "build_rules", "halts_pipeline"]
