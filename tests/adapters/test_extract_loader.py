from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from renecsync.adapters.extracts import load_extract, load_registry_extracts
from renecsync.domain.extracts import (
    CERTIFIERS_EXTRACT,
    COMMITTEES_EXTRACT,
    MATRIX_EXTRACT,
    STANDARDS_EXTRACT,
)
from renecsync.domain.reconciliation.fingerprint import content_fingerprint
from tests.helpers.extracts import (
    certifier_payload,
    committee_payload,
    registry_payload,
    standard_payload,
    write_extracts,
)

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_load_registry_extracts_reads_every_present_file(tmp_path: Path) -> None:
    write_extracts(
        tmp_path,
        standards=[standard_payload("EC0249")],
        committees=[committee_payload("CGC-01", standards=["EC0249"])],
        certifiers=[certifier_payload("ECE001-10", codes=["EC0249"])],
        centers=[],
        matrix={"EC0249": ["ECE001-10"]},
        occupations={"EC0249": ["Consultor"]},
    )

    extracts = load_registry_extracts(tmp_path)

    assert extracts.has_standards
    assert extracts.standards is not None
    assert extracts.standards[0].code == "EC0249"
    assert extracts.standards[0].sector_key == 5
    assert extracts.committees is not None
    assert extracts.committees[0].associated_standards[0].code == "EC0249"
    assert extracts.certifiers is not None
    assert extracts.certifiers.registry[0].standard_codes == ["EC0249"]
    assert extracts.centers is not None
    assert extracts.centers.registry == []
    assert extracts.matrix is not None
    assert extracts.matrix.matrix["EC0249"].certifier_ids == ["ECE001-10"]
    assert extracts.details is not None
    assert extracts.details.ec_details["EC0249"].occupations == ["Consultor"]


def test_missing_files_are_none(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    write_extracts(tmp_path, standards=[standard_payload("EC0249")])

    with caplog.at_level(logging.WARNING):
        extracts = load_registry_extracts(tmp_path)

    assert extracts.standards is not None
    assert extracts.certifiers is None
    assert extracts.centers is None
    assert extracts.committees is None
    assert extracts.matrix is None
    assert extracts.details is None
    assert "Standard-certifier matrix not found" in caplog.text


def test_missing_directory_yields_no_standards(tmp_path: Path) -> None:
    extracts = load_registry_extracts(tmp_path / "absent")

    assert not extracts.has_standards


def test_malformed_json_is_treated_as_absent(tmp_path: Path) -> None:
    (tmp_path / STANDARDS_EXTRACT.file_name).write_text("[{not json", encoding="utf-8")

    assert load_extract(tmp_path, STANDARDS_EXTRACT) is None


def test_wrong_shape_is_treated_as_absent(tmp_path: Path) -> None:
    (tmp_path / MATRIX_EXTRACT.file_name).write_text(
        json.dumps({"matrix": ["not", "a", "mapping"]}), encoding="utf-8"
    )

    assert load_extract(tmp_path, MATRIX_EXTRACT) is None


def test_numeric_keys_and_nulls_are_coerced(tmp_path: Path) -> None:
    committee = committee_payload(None, postal_code=6600, sector_id=12)
    committee["clave"] = 1234
    committee["estandaresAsociados"] = None
    (tmp_path / COMMITTEES_EXTRACT.file_name).write_text(
        json.dumps([committee]), encoding="utf-8"
    )
    certifier = certifier_payload("ECE002-11")
    certifier["ec_codes"] = None
    certifier["alternate_names"] = None
    (tmp_path / CERTIFIERS_EXTRACT.file_name).write_text(
        json.dumps({"registry": [certifier]}), encoding="utf-8"
    )

    committees = load_extract(tmp_path, COMMITTEES_EXTRACT)
    certifiers = load_extract(tmp_path, CERTIFIERS_EXTRACT)

    assert committees is not None
    assert committees[0].key == "1234"
    assert committees[0].postal_code == "6600"
    assert committees[0].sector_key == 12
    assert committees[0].associated_standards == []
    assert certifiers is not None
    assert certifiers.registry[0].standard_codes == []
    assert certifiers.registry[0].alternate_names is None


def test_raw_keeps_source_keys_and_unknown_fields(tmp_path: Path) -> None:
    payload = standard_payload("EC0249")
    payload["vigente"] = True
    write_extracts(tmp_path, standards=[payload])

    standards = load_extract(tmp_path, STANDARDS_EXTRACT)

    assert standards is not None
    raw = standards[0].raw()
    assert raw["codigo"] == "EC0249"
    assert raw["vigente"] is True
    assert "code" not in raw


def test_invalid_standard_is_dropped_not_the_file(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    broken = standard_payload("EC0001")
    broken["titulo"] = 42
    write_extracts(tmp_path, standards=[standard_payload("EC0249"), broken])

    with caplog.at_level(logging.WARNING):
        standards = load_extract(tmp_path, STANDARDS_EXTRACT)

    assert standards is not None
    assert [standard.code for standard in standards] == ["EC0249"]
    assert "Dropped 1 invalid record(s) from Standards" in caplog.text
    assert "record 1" in caplog.text


def test_invalid_registry_record_is_dropped(tmp_path: Path) -> None:
    broken = certifier_payload("ECE002-11")
    broken["canonical_name"] = {"nombre": "Certificadora"}
    (tmp_path / CERTIFIERS_EXTRACT.file_name).write_text(
        json.dumps(registry_payload([certifier_payload("ECE001-10"), broken])),
        encoding="utf-8",
    )

    certifiers = load_extract(tmp_path, CERTIFIERS_EXTRACT)

    assert certifiers is not None
    assert [certifier.key for certifier in certifiers.registry] == ["ECE001-10"]


def test_invalid_matrix_entry_is_dropped_and_numeric_ids_coerced(tmp_path: Path) -> None:
    (tmp_path / MATRIX_EXTRACT.file_name).write_text(
        json.dumps(
            {
                "matrix": {
                    "EC0249": {"ece_ids": [123, " ", "ECE001-10"], "ece_count": "2"},
                    "EC0001": {"ece_ids": "ECE001-10"},
                }
            }
        ),
        encoding="utf-8",
    )

    matrix = load_extract(tmp_path, MATRIX_EXTRACT)

    assert matrix is not None
    assert list(matrix.matrix) == ["EC0249"]
    assert matrix.matrix["EC0249"].certifier_ids == ["123", "ECE001-10"]
    assert matrix.matrix["EC0249"].certifier_count == 2


def test_numeric_standard_codes_and_blank_committee_type(tmp_path: Path) -> None:
    certifier = certifier_payload("ECE001-10")
    certifier["ec_codes"] = [249, "EC0001"]
    (tmp_path / CERTIFIERS_EXTRACT.file_name).write_text(
        json.dumps(registry_payload([certifier])), encoding="utf-8"
    )
    blank_type = committee_payload("CGC-01")
    blank_type["idTipoComite"] = ""
    numbered_type = committee_payload("CGC-02")
    numbered_type["idTipoComite"] = " 3 "
    (tmp_path / COMMITTEES_EXTRACT.file_name).write_text(
        json.dumps([blank_type, numbered_type]), encoding="utf-8"
    )

    certifiers = load_extract(tmp_path, CERTIFIERS_EXTRACT)
    committees = load_extract(tmp_path, COMMITTEES_EXTRACT)

    assert certifiers is not None
    assert certifiers.registry[0].standard_codes == ["249", "EC0001"]
    assert committees is not None
    assert [committee.committee_type for committee in committees] == [None, 3]


def test_fingerprint_sees_formatting_only_changes(tmp_path: Path) -> None:
    original = standard_payload("EC0249")
    padded = {**original, "codigo": " EC0249 "}
    numeric = {**original, "nivel": 3}
    write_extracts(tmp_path, standards=[padded, numeric, original])

    standards = load_extract(tmp_path, STANDARDS_EXTRACT)

    assert standards is not None
    assert {standard.code for standard in standards} == {"EC0249"}
    assert standards[0].raw()["codigo"] == " EC0249 "
    assert standards[1].raw()["nivel"] == 3
    hashes = {content_fingerprint(standard.raw()) for standard in standards}
    assert len(hashes) == 3
