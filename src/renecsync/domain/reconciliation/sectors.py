"""Derive the productive-sector dimension from standard records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from renecsync.domain.model import Sector

from .batching import RecordStepReport, upsert_in_batches
from .fingerprint import content_fingerprint
from .normalize import clean_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from renecsync.domain.extracts import StandardRecord
    from renecsync.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)


def sector_name_fallback(sector_key: int) -> str:
    return f"Sector {sector_key}"


def collect_sectors(standards: Iterable[StandardRecord]) -> dict[int, str]:
    """Return sector key to display name; the first non-blank name seen per key wins.

    Records whose sector identifier is missing or not an integer are ignored.
    """

    names: dict[int, str | None] = {}
    for record in standards:
        sector_key = record.sector_key
        if sector_key is None:
            continue
        if names.get(sector_key) is None:
            names[sector_key] = clean_text(record.sector_name)
    return {key: name or sector_name_fallback(key) for key, name in names.items()}


def resolve_sectors(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    standards: Iterable[StandardRecord],
    *,
    batch_size: int,
    source_url: str,
) -> RecordStepReport[int]:
    """Upsert every distinct sector referenced by ``standards``."""

    sectors = [
        Sector(
            sector_key=sector_key,
            name=name,
            source_url=source_url,
            content_hash=content_fingerprint(
                {"idSectorProductivo": sector_key, "secProductivo": name}
            ),
        )
        for sector_key, name in collect_sectors(standards).items()
    ]
    identities = upsert_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.sectors,
        sectors,
        batch_size=batch_size,
        label="Sectors",
    )
    log.info("Sectors: %d upserted", len(sectors))
    return RecordStepReport(processed=len(sectors), identities=identities)
