from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from renecsync.config import ConfigurationError
from renecsync.domain.extracts import MandatoryExtractMissingError
from renecsync.domain.model import SyncJob, SyncJobStatus
from renecsync.domain.reconciliation import RegistrySyncResult, SyncStats
from renecsync.domain.validation import CheckResult, CheckStatus, ValidationReport
from renecsync.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Callable


def _sync_result(errors: list[str]) -> RegistrySyncResult:
    now = datetime.now(tz=UTC)
    job = SyncJob(
        started_at=now,
        completed_at=now,
        status=SyncJobStatus.COMPLETED_WITH_ERRORS if errors else SyncJobStatus.COMPLETED,
        errors=list(errors),
    )
    return RegistrySyncResult(job=job, stats=SyncStats(), errors=list(errors))


def _raise(exc: Exception) -> Callable[..., object]:
    def fake(**_kwargs: object) -> object:
        raise exc

    return fake


def test_sync_defaults_to_configured_directory(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> RegistrySyncResult:
        captured.update(kwargs)
        return _sync_result([])

    monkeypatch.setattr(cli_module, "sync_registry", fake_sync)

    cli_module.main(["sync"])

    assert captured == {"data_dir": None}


def test_sync_with_data_dir_and_step_errors_exits_normally(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(**kwargs: object) -> RegistrySyncResult:
        captured.update(kwargs)
        return _sync_result(["offerings: boom"])

    monkeypatch.setattr(cli_module, "sync_registry", fake_sync)

    cli_module.main(["sync", "--data-dir", "extracts", "-v"])

    assert captured["data_dir"] == Path("extracts")


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (MandatoryExtractMissingError("no standards"), 1),
        (ConfigurationError("bad batch size"), 2),
        (RuntimeError("database unavailable"), 1),
    ],
)
def test_sync_failures_map_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch, exc: Exception, code: int
) -> None:
    monkeypatch.setattr(cli_module, "sync_registry", _raise(exc))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == code


def test_validate_prints_report(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    report = ValidationReport(
        results=[CheckResult(check="standard count", status=CheckStatus.PASS, detail="1/1")]
    )
    monkeypatch.setattr(cli_module, "validate_registry", lambda: report)

    cli_module.main(["validate"])

    output = capsys.readouterr().out
    assert "Registry coverage validation" in output
    assert "[PASS] standard count: 1/1" in output


def test_validate_exits_non_zero_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    report = ValidationReport(
        results=[
            CheckResult(
                check="offering referential integrity", status=CheckStatus.FAIL, detail="1"
            )
        ]
    )
    monkeypatch.setattr(cli_module, "validate_registry", lambda: report)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["validate"])

    assert excinfo.value.code == 1


def test_unknown_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reindex"])

    assert excinfo.value.code == 2
