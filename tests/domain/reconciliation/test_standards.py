from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import select

from renecsync.domain.extracts import CommitteeRecord, StandardDetailsFile, StandardRecord
from renecsync.domain.model import Occupation, Standard
from renecsync.domain.reconciliation.key_index import CanonicalKeyIndex, ResolvedIdentities
from renecsync.domain.reconciliation.standards import (
    attach_occupations,
    build_source_metadata,
    build_standard,
    occupation_pairs,
    resolve_standards,
)
from tests.helpers.extracts import committee_payload, details_payload, standard_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from renecsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegistryUnitOfWork


def _index(
    committees: list[CommitteeRecord] | None = None,
    occupations: dict[str, list[str]] | None = None,
) -> CanonicalKeyIndex:
    details = None
    if occupations is not None:
        details = StandardDetailsFile.model_validate(details_payload(occupations))
    return CanonicalKeyIndex(committees=committees, details=details)


def test_source_metadata_without_committee_or_detail() -> None:
    record = StandardRecord.model_validate(standard_payload("EC0249", committee="CGC-01"))

    assert build_source_metadata(record, None, None) == {
        "comite": "CGC-01",
        "idSectorProductivo": "5",
        "idEstandarCompetencia": "id-EC0249",
    }


def test_source_metadata_with_committee_and_detail() -> None:
    record = StandardRecord.model_validate(standard_payload("EC0249"))
    committee = CommitteeRecord.model_validate(committee_payload("CGC-01", name="Gestión"))
    index = _index(occupations={"EC0249": ["Consultor"]})

    metadata = build_source_metadata(record, committee, index.detail_for_standard("EC0249"))

    assert metadata["committee_key"] == "CGC-01"
    assert metadata["committee_name"] == "Gestión"
    assert metadata["committee_state"] == "Ciudad de México"
    assert metadata["occupations"] == ["Consultor"]
    assert metadata["courses"] == ["Curso básico"]
    assert metadata["committee_members"] == ["Empresa A"]


def test_build_standard_links_committee_and_declared_sector_independently() -> None:
    committee_id, sector_id = uuid4(), uuid4()
    committee = CommitteeRecord.model_validate(
        committee_payload("CGC-01", sector_id=9, standards=["EC0249"])
    )
    record = StandardRecord.model_validate(standard_payload("EC0249", sector_id="5", level="4"))
    identities = ResolvedIdentities(sectors={5: sector_id}, committees={"CGC-01": committee_id})

    standard = build_standard(
        record, "EC0249", index=_index([committee]), identities=identities, source_url="u"
    )

    assert standard.committee_id == committee_id
    assert standard.sector_id == sector_id
    assert standard.level == 4
    assert standard.is_valid


def test_build_standard_without_known_links() -> None:
    record = StandardRecord.model_validate(
        standard_payload("EC0249", sector_id=None, level="n/a")
    )
    record.title = None

    standard = build_standard(
        record, "EC0249", index=_index(), identities=ResolvedIdentities(), source_url="u"
    )

    assert standard.committee_id is None
    assert standard.sector_id is None
    assert standard.level is None
    assert standard.title == ""


def test_resolve_standards_skips_missing_codes(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    records = [
        StandardRecord.model_validate(standard_payload("EC0249")),
        StandardRecord.model_validate(standard_payload(None)),
        StandardRecord.model_validate(standard_payload(" EC0001 ")),
    ]

    report = resolve_standards(
        sqlite_unit_of_work,
        records,
        index=_index(),
        identities=ResolvedIdentities(),
        batch_size=2,
        source_url="u",
    )

    assert (report.processed, report.skipped) == (2, 1)
    with sqlite_unit_of_work() as uow:
        codes = uow.session.execute(select(Standard.code).order_by(Standard.code)).scalars()
        assert list(codes) == ["EC0001", "EC0249"]


def test_occupation_pairs_flatten_and_deduplicate() -> None:
    standard_id = uuid4()
    index = _index(occupations={"EC0249": ["Consultor", " Consultor", "", "Asesor"]})

    pairs = occupation_pairs({"EC0249": standard_id, "EC0001": uuid4()}, index)

    assert pairs == [(standard_id, "Consultor"), (standard_id, "Asesor")]


def test_attach_occupations_only_adds(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> None:
    record = StandardRecord.model_validate(standard_payload("EC0249"))
    report = resolve_standards(
        sqlite_unit_of_work,
        [record],
        index=_index(),
        identities=ResolvedIdentities(),
        batch_size=10,
        source_url="u",
    )

    first = attach_occupations(
        sqlite_unit_of_work,
        report.identities,
        index=_index(occupations={"EC0249": ["Consultor"]}),
        batch_size=10,
    )
    second = attach_occupations(
        sqlite_unit_of_work,
        report.identities,
        index=_index(occupations={"EC0249": ["Asesor"]}),
        batch_size=10,
    )

    assert (first.attempted, first.inserted) == (1, 1)
    assert (second.attempted, second.inserted) == (1, 1)
    with sqlite_unit_of_work() as uow:
        labels = uow.session.execute(select(Occupation.occupation)).scalars().all()
    assert sorted(labels) == ["Asesor", "Consultor"]
