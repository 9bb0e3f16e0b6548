"""Filesystem loader for registry extract files."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from renecsync.domain.extracts import (
    CENTERS_EXTRACT,
    CERTIFIERS_EXTRACT,
    COMMITTEES_EXTRACT,
    DETAILS_EXTRACT,
    MATRIX_EXTRACT,
    STANDARDS_EXTRACT,
    ExtractFile,
    RegistryExtracts,
)

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


def load_extract[T](directory: Path, extract: ExtractFile[T]) -> T | None:
    """Load and validate one extract file.

    Missing and malformed files are reported as warnings and yield ``None`` so that
    callers can treat "no data for this source" as an ordinary branch. Invalid records
    inside an otherwise well-formed file are dropped and counted in one warning.
    """

    path = directory / extract.file_name
    dropped: list[str] = []
    if not path.is_file():
        log.warning("%s not found at %s", extract.label, path)
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        value = extract.validate(payload, dropped)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.warning("Failed to read %s from %s: %s", extract.label, path, exc)
        return None
    except ValidationError as exc:
        log.warning(
            "Failed to parse %s from %s: %d validation error(s), first: %s",
            extract.label,
            path,
            exc.error_count(),
            exc.errors()[0]["msg"] if exc.error_count() else "unknown",
        )
        return None
    if dropped:
        log.warning(
            "Dropped %d invalid record(s) from %s, first: %s",
            len(dropped),
            extract.label,
            dropped[0],
        )
    log.info("%s: %d records found", extract.label, extract.count(value))
    return value


def load_registry_extracts(directory: Path) -> RegistryExtracts:
    """Load every known extract from ``directory``."""

    log.info("Loading registry extracts from %s", directory)
    if not directory.is_dir():
        log.warning("Extracts directory %s does not exist", directory)
    return RegistryExtracts(
        standards=load_extract(directory, STANDARDS_EXTRACT),
        certifiers=load_extract(directory, CERTIFIERS_EXTRACT),
        centers=load_extract(directory, CENTERS_EXTRACT),
        committees=load_extract(directory, COMMITTEES_EXTRACT),
        matrix=load_extract(directory, MATRIX_EXTRACT),
        details=load_extract(directory, DETAILS_EXTRACT),
    )
