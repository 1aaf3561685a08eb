"""Well-formedness checks for enclosure signatures.

Only the encoding is checked: the public key is not known here, so the
signature itself cannot be verified. Sparkle rejects a signature that does
not decode to the right size, which is why failures here are errors.
"""

from __future__ import annotations

import re
from typing import Literal

from appcast.validator.constants import (
    DSA_SIGNATURE_MAX_BYTES,
    DSA_SIGNATURE_MIN_BYTES,
    ED25519_SIGNATURE_BYTES,
)

SignatureAlgorithm = Literal["ed25519", "dsa"]

_WHITESPACE_RE = re.compile(r"\s+")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


def decoded_length(encoded: str) -> int:
    """Byte length of a padded base64 string, computed without decoding."""
    padding = len(encoded) - len(encoded.rstrip("="))
    return len(encoded) * 3 // 4 - padding


def check_signature(value: str, algorithm: SignatureAlgorithm) -> str | None:
    """Return None for a well-formed signature, otherwise the reason it is not.

    Whitespace is ignored because multi-line base64 is legal in attributes.
    """
    compact = _WHITESPACE_RE.sub("", value)
    if not compact:
        return "signature is empty"
    if not _BASE64_RE.match(compact):
        return "signature contains characters outside the base64 alphabet"
    if len(compact) % 4 != 0:
        return "signature has invalid base64 padding"

    size = decoded_length(compact)
    if algorithm == "ed25519":
        if size != ED25519_SIGNATURE_BYTES:
            return (
                f"EdDSA (ed25519) signature decodes to {size} bytes, "
                f"expected exactly {ED25519_SIGNATURE_BYTES}"
            )
    elif not DSA_SIGNATURE_MIN_BYTES <= size <= DSA_SIGNATURE_MAX_BYTES:
        return (
            f"DSA signature decodes to {size} bytes, expected between "
            f"{DSA_SIGNATURE_MIN_BYTES} and {DSA_SIGNATURE_MAX_BYTES}"
        )
    return None
