from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from renecsync import app as app_module
from renecsync.config import SyncConfig
from renecsync.domain.extracts import MandatoryExtractMissingError
from tests.helpers.extracts import certifier_payload, write_extracts

if TYPE_CHECKING:
    from pathlib import Path


def test_missing_standards_abort_before_touching_the_store(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_extracts(tmp_path, standards=[], certifiers=[certifier_payload("ECE001-10")])

    def fail_startup() -> None:
        raise AssertionError("store must not be started")

    monkeypatch.setattr(app_module, "_ensure_started", fail_startup)

    with pytest.raises(MandatoryExtractMissingError, match="ec_standards_api.json"):
        app_module.sync_registry(config=SyncConfig(extracts_dir=tmp_path))


def test_data_dir_overrides_configured_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: list[Path] = []

    def fake_load(directory: Path) -> object:
        seen.append(directory)
        raise MandatoryExtractMissingError("stop")

    monkeypatch.setattr(app_module, "load_registry_extracts", fake_load)

    with pytest.raises(MandatoryExtractMissingError):
        app_module.sync_registry(
            data_dir=tmp_path / "override", config=SyncConfig(extracts_dir=tmp_path)
        )

    assert seen == [tmp_path / "override"]
