"""Deterministic content fingerprints for raw source records."""

from __future__ import annotations

import hashlib
import json
from typing import Final

FINGERPRINT_LENGTH: Final[int] = 16


def content_fingerprint(record: object) -> str:
    """Return a short SHA-256 digest of ``record``'s canonical JSON form.

    Keys are sorted so two records with the same content always hash the same,
    regardless of the order the extractor wrote them in.
    """

    payload = json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]
