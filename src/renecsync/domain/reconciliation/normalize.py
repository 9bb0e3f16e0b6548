"""Text and value normalization shared by the resolvers."""

from __future__ import annotations

import unicodedata


def clean_text(value: str | None) -> str | None:
    """Strip surrounding whitespace; blank becomes ``None``."""

    if value is None:
        return None
    text = value.strip()
    return text or None


def fold_text(value: str | None) -> str | None:
    """Return a case- and accent-insensitive form of ``value`` for comparisons."""

    if value is None:
        return None
    text = unicodedata.normalize("NFKD", value)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = " ".join(text.casefold().split())
    return text or None


def clean_labels(values: list[str]) -> list[str]:
    """Trim labels, drop empty ones and de-duplicate preserving first-seen order."""

    seen: dict[str, None] = {}
    for value in values:
        label = clean_text(value)
        if label is not None:
            seen.setdefault(label, None)
    return list(seen)
