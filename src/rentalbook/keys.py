"""Header to field-key normalisation."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_key(header: str) -> str:
    """Return the canonical field key for a column *header*.

    Lower-cases and drops all whitespace, so ``"Rental ID"`` becomes
    ``"rentalid"``.
    """
    return _WHITESPACE_RE.sub("", str(header).lower())
