from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy import select

from renecsync.domain.extracts import CommitteeRecord
from renecsync.domain.model import Committee
from renecsync.domain.reconciliation.committees import (
    build_committee,
    inegi_state_code,
    normalize_postal_code,
    parse_registry_timestamp,
    resolve_committees,
)
from tests.helpers.extracts import committee_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from renecsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegistryUnitOfWork


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("Ciudad de México", "09"),
        ("ciudad de mexico", "09"),
        ("  JALISCO ", "14"),
        ("Veracruz de Ignacio de la Llave", "30"),
        ("Estado de México", "15"),
        ("Atlantis", None),
        (None, None),
    ],
)
def test_inegi_state_code(state: str | None, expected: str | None) -> None:
    assert inegi_state_code(state) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("6600", "06600"), ("44100", "44100"), (" 123 ", "00123"), ("C.P. 1", "C.P. 1"), ("", None)],
)
def test_normalize_postal_code(value: str | None, expected: str | None) -> None:
    assert normalize_postal_code(value) == expected


def test_parse_registry_timestamp_accepts_epoch_milliseconds_and_seconds() -> None:
    expected = datetime(2020, 1, 1, tzinfo=UTC)

    assert parse_registry_timestamp(1_577_836_800_000) == expected
    assert parse_registry_timestamp(1_577_836_800) == expected
    assert parse_registry_timestamp("1577836800000") == expected


def test_parse_registry_timestamp_accepts_iso_strings() -> None:
    assert parse_registry_timestamp("2020-01-01T06:00:00+06:00") == datetime(
        2020, 1, 1, tzinfo=UTC
    )
    assert parse_registry_timestamp("2020-01-01") == datetime(2020, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", "not a date", True])
def test_parse_registry_timestamp_rejects_garbage(value: object) -> None:
    assert parse_registry_timestamp(value) is None  # type: ignore[arg-type]


def test_build_committee_normalizes_fields() -> None:
    sector_id = uuid4()
    record = CommitteeRecord.model_validate(committee_payload("CGC-01", sector_id=5))

    committee = build_committee(
        record, "CGC-01", sector_ids={5: sector_id}, source_url="https://example.mx"
    )

    assert committee.committee_key == "CGC-01"
    assert committee.postal_code == "06600"
    assert committee.state_code == "09"
    assert committee.enrolled_at == datetime(2020, 1, 1, tzinfo=UTC)
    assert committee.sector_id == sector_id
    assert committee.url is None
    assert committee.vice_president_title is None
    assert committee.content_hash is not None


def test_build_committee_leaves_unknown_sector_unlinked() -> None:
    record = CommitteeRecord.model_validate(committee_payload("CGC-01", sector_id=99))

    committee = build_committee(record, "CGC-01", sector_ids={}, source_url="u")

    assert committee.sector_id is None


def test_resolve_committees_skips_keyless_records(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    records = [
        CommitteeRecord.model_validate(committee_payload("CGC-01")),
        CommitteeRecord.model_validate(committee_payload("  ")),
        CommitteeRecord.model_validate(committee_payload("CGC-02", name="Otro")),
    ]

    report = resolve_committees(
        sqlite_unit_of_work, records, sector_ids={}, batch_size=1, source_url="u"
    )

    assert report.processed == 2
    assert report.skipped == 1
    assert set(report.identities) == {"CGC-01", "CGC-02"}
    with sqlite_unit_of_work() as uow:
        keys = uow.session.execute(select(Committee.committee_key)).scalars().all()
    assert sorted(keys) == ["CGC-01", "CGC-02"]
