"""Committee resolver: normalize oversight-committee records and upsert them."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from renecsync.domain.model import Committee

from .batching import RecordStepReport, upsert_in_batches
from .fingerprint import content_fingerprint
from .normalize import clean_text, fold_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from uuid import UUID

    from renecsync.domain.extracts import CommitteeRecord
    from renecsync.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)

POSTAL_CODE_LENGTH: Final[int] = 5
# Epoch values above this are milliseconds (1e11 seconds is past the year 5000).
MILLISECOND_EPOCH_THRESHOLD: Final[float] = 1e11

_INEGI_STATE_CODES: Final[dict[str, str]] = {
    "Aguascalientes": "01",
    "Baja California": "02",
    "Baja California Sur": "03",
    "Campeche": "04",
    "Coahuila": "05",
    "Coahuila de Zaragoza": "05",
    "Colima": "06",
    "Chiapas": "07",
    "Chihuahua": "08",
    "Ciudad de México": "09",
    "CDMX": "09",
    "Distrito Federal": "09",
    "Durango": "10",
    "Guanajuato": "11",
    "Guerrero": "12",
    "Hidalgo": "13",
    "Jalisco": "14",
    "México": "15",
    "Estado de México": "15",
    "Michoacán": "16",
    "Michoacán de Ocampo": "16",
    "Morelos": "17",
    "Nayarit": "18",
    "Nuevo León": "19",
    "Oaxaca": "20",
    "Puebla": "21",
    "Querétaro": "22",
    "Quintana Roo": "23",
    "San Luis Potosí": "24",
    "Sinaloa": "25",
    "Sonora": "26",
    "Tabasco": "27",
    "Tamaulipas": "28",
    "Tlaxcala": "29",
    "Veracruz": "30",
    "Veracruz de Ignacio de la Llave": "30",
    "Yucatán": "31",
    "Zacatecas": "32",
}

INEGI_STATE_CODES: Final[Mapping[str, str]] = MappingProxyType(
    {fold_text(name) or name: code for name, code in _INEGI_STATE_CODES.items()}
)


def inegi_state_code(state: str | None) -> str | None:
    """Map a Mexican state name to its two-digit INEGI code, ignoring case and accents."""

    folded = fold_text(state)
    if folded is None:
        return None
    return INEGI_STATE_CODES.get(folded)


def normalize_postal_code(value: str | None) -> str | None:
    """Strip the code and left-pad purely numeric values to five digits."""

    postal_code = clean_text(value)
    if postal_code is None:
        return None
    if postal_code.isdigit() and len(postal_code) < POSTAL_CODE_LENGTH:
        return postal_code.zfill(POSTAL_CODE_LENGTH)
    return postal_code


def parse_registry_timestamp(value: float | str | None) -> datetime | None:
    """Convert an epoch (seconds or milliseconds) or ISO-8601 value to an aware UTC datetime.

    Unparseable values yield ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return _parse_iso_timestamp(text)
    seconds = value / 1000 if abs(value) > MILLISECOND_EPOCH_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        log.debug("Ignoring out-of-range timestamp %r", value)
        return None


def _parse_iso_timestamp(text: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        log.debug("Ignoring unparseable timestamp %r", text)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def build_committee(
    record: CommitteeRecord,
    committee_key: str,
    *,
    sector_ids: Mapping[int, UUID],
    source_url: str,
) -> Committee:
    sector_key = record.sector_key
    state = clean_text(record.state)
    return Committee(
        committee_key=committee_key,
        name=clean_text(record.name) or "",
        president=clean_text(record.president),
        vice_president=clean_text(record.vice_president),
        president_title=clean_text(record.president_title),
        vice_president_title=clean_text(record.vice_president_title),
        contact=clean_text(record.contact),
        email=clean_text(record.email),
        phones=clean_text(record.phones),
        url=clean_text(record.url),
        street=clean_text(record.street),
        neighborhood=clean_text(record.neighborhood),
        postal_code=normalize_postal_code(record.postal_code),
        locality=clean_text(record.locality),
        municipality=clean_text(record.municipality),
        state=state,
        state_code=inegi_state_code(state),
        committee_type=record.committee_type,
        enrolled_at=parse_registry_timestamp(record.enrolled_at),
        sector_id=sector_ids.get(sector_key) if sector_key is not None else None,
        source_url=source_url,
        content_hash=content_fingerprint(record.raw()),
    )


def resolve_committees(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    committees: Iterable[CommitteeRecord],
    *,
    sector_ids: Mapping[int, UUID],
    batch_size: int,
    source_url: str,
) -> RecordStepReport[str]:
    """Upsert committees by key, linking each to its sector when that sector is known."""

    report: RecordStepReport[str] = RecordStepReport()
    entities: list[Committee] = []
    for record in committees:
        committee_key = clean_text(record.key)
        if committee_key is None:
            log.debug("Skipping committee without key (record id %s)", record.record_id)
            report.skipped += 1
            continue
        entities.append(
            build_committee(
                record, committee_key, sector_ids=sector_ids, source_url=source_url
            )
        )

    report.identities = upsert_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.committees,
        entities,
        batch_size=batch_size,
        label="Committees",
    )
    report.processed = len(entities)
    log.info("Committees: %d upserted, %d skipped", report.processed, report.skipped)
    return report
