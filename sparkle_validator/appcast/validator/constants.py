"""Names, namespaces and limits shared by the rule modules."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

SPARKLE_NS = "http://www.andymatuschak.org/xml-namespaces/sparkle"

# Namespace URIs Sparkle accepts in practice. The URI is an identifier and is
# never fetched, so these variants work but are flagged.
SPARKLE_NS_VARIANTS = frozenset(
    {
        SPARKLE_NS,
        "http://andymatuschak.org/xml-namespaces/sparkle",
        "https://www.andymatuschak.org/xml-namespaces/sparkle",
        "https://andymatuschak.org/xml-namespaces/sparkle",
    }
)

XML_NS = "http://www.w3.org/XML/1998/namespace"
XMLNS_NS = "http://www.w3.org/2000/xmlns/"

SPARKLE_PREFIX = "sparkle"


def is_sparkle_namespace(uri: str | None) -> bool:
    """Return True for the canonical Sparkle namespace or a known variant."""
    return uri is not None and uri in SPARKLE_NS_VARIANTS


# -- RSS elements (no namespace) --

RSS_ROOT = "rss"
RSS_VERSION = "2.0"
CHANNEL = "channel"
ITEM = "item"
TITLE = "title"
LINK = "link"
DESCRIPTION = "description"
PUB_DATE = "pubDate"
ENCLOSURE = "enclosure"
LANGUAGE = "language"

# -- Sparkle elements --

SPARKLE_VERSION = "version"
SPARKLE_SHORT_VERSION_STRING = "shortVersionString"
SPARKLE_RELEASE_NOTES_LINK = "releaseNotesLink"
SPARKLE_FULL_RELEASE_NOTES_LINK = "fullReleaseNotesLink"
SPARKLE_MINIMUM_SYSTEM_VERSION = "minimumSystemVersion"
SPARKLE_MAXIMUM_SYSTEM_VERSION = "maximumSystemVersion"
SPARKLE_HARDWARE_REQUIREMENTS = "hardwareRequirements"
SPARKLE_CRITICAL_UPDATE = "criticalUpdate"
SPARKLE_PHASED_ROLLOUT_INTERVAL = "phasedRolloutInterval"
SPARKLE_CHANNEL = "channel"
SPARKLE_INSTALLATION_TYPE = "installationType"
SPARKLE_INFORMATIONAL_UPDATE = "informationalUpdate"
SPARKLE_DELTAS = "deltas"

# -- Enclosure attributes --

ENCLOSURE_URL = "url"
ENCLOSURE_LENGTH = "length"
ENCLOSURE_TYPE = "type"
ATTR_VERSION = "version"
ATTR_SHORT_VERSION_STRING = "shortVersionString"
ATTR_ED_SIGNATURE = "edSignature"
ATTR_DSA_SIGNATURE = "dsaSignature"
ATTR_OS = "os"
ATTR_DELTA_FROM = "deltaFrom"
ATTR_INSTALLATION_TYPE = "installationType"

ENCLOSURE_MIME_TYPE = "application/octet-stream"

VALID_INSTALLATION_TYPES = frozenset({"application", "package"})

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

KNOWN_ARCHITECTURES = frozenset({"arm64", "x86_64"})

DEFAULT_OS = "macos"

# -- Value formats --

NUMERIC_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")
MACOS_VERSION_RE = re.compile(r"^\d+(\.\d+){0,2}$")
CHANNEL_NAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")
NON_NEGATIVE_INT_RE = re.compile(r"^\d+$")
UNENCODED_URL_CHARS_RE = re.compile(r"[{}|\\^`\[\]<> ]")

# -- Dates --

# Allowance for publisher clocks that run slightly ahead.
PUB_DATE_FUTURE_SKEW = timedelta(hours=24)
# Sparkle was first released in 2006; nothing older is a real release date.
EARLIEST_PLAUSIBLE_PUB_DATE = datetime(2006, 1, 1, tzinfo=timezone.utc)

SECONDS_PER_DAY = 86400

# -- Signatures --

ED25519_SIGNATURE_BYTES = 64
DSA_SIGNATURE_MIN_BYTES = 40
DSA_SIGNATURE_MAX_BYTES = 80
