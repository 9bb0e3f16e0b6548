"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from renecsync.adapters.extracts import load_registry_extracts
from renecsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyInspectionUnitOfWork,
    SqlAlchemyRegistryUnitOfWork,
    is_started,
    startup,
)
from renecsync.config import get_sync_config, get_validation_config
from renecsync.domain.extracts import STANDARDS_EXTRACT, MandatoryExtractMissingError
from renecsync.domain.model import RegistryEntity
from renecsync.domain.ports.unit_of_work import InspectionUnitOfWork, RegistryUnitOfWork
from renecsync.domain.reconciliation import RegistrySyncResult, SyncOptions
from renecsync.domain.reconciliation import sync_registry as reconcile_registry
from renecsync.domain.validation import ValidationReport
from renecsync.domain.validation import validate_registry as grade_registry

if TYPE_CHECKING:
    from pathlib import Path

    from renecsync.config import SyncConfig, ValidationConfig

UnitOfWorkFactory = Callable[[], RegistryUnitOfWork]
InspectionUnitOfWorkFactory = Callable[[], InspectionUnitOfWork]


log = getLogger(__name__)


def _sync_options(config: SyncConfig) -> SyncOptions:
    return SyncOptions(
        source_url=config.source_url,
        sector_batch_size=config.sector_batch_size,
        committee_batch_size=config.committee_batch_size,
        standard_batch_size=config.standard_batch_size,
        organization_batch_size=config.organization_batch_size,
        link_batch_size=config.link_batch_size,
    )


def _ensure_started() -> None:
    if not is_started():
        startup()


def sync_registry(
    *,
    data_dir: Path | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    inspection_unit_of_work_factory: InspectionUnitOfWorkFactory | None = None,
    config: SyncConfig | None = None,
) -> RegistrySyncResult:
    """Load the registry extracts from ``data_dir`` and reconcile them into the store."""

    sync_config = config or get_sync_config()
    extracts_dir = data_dir or sync_config.extracts_dir
    log.info("Starting registry sync from %s", extracts_dir)

    extracts = load_registry_extracts(extracts_dir)
    if not extracts.has_standards:
        raise MandatoryExtractMissingError(
            f"{STANDARDS_EXTRACT.label} ({STANDARDS_EXTRACT.file_name}) missing or empty "
            f"in {extracts_dir}"
        )

    if unit_of_work_factory is None or inspection_unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyRegistryUnitOfWork
    effective_inspection_uow = inspection_unit_of_work_factory or SqlAlchemyInspectionUnitOfWork

    result = reconcile_registry(
        extracts,
        unit_of_work_factory=effective_uow,
        options=_sync_options(sync_config),
    )

    with effective_inspection_uow() as uow:
        counts = uow.repositories.inspector.table_counts(RegistryEntity)
    log.info(
        "Finished registry sync: status=%s, processed=%d, skipped=%d, errors=%d",
        result.job.status,
        result.job.items_processed,
        result.job.items_skipped,
        len(result.errors),
    )
    for entity, count in counts.items():
        log.info("  %s: %d rows", entity, count)

    return result


def validate_registry(
    *,
    unit_of_work_factory: InspectionUnitOfWorkFactory | None = None,
    config: ValidationConfig | None = None,
) -> ValidationReport:
    """Grade the current store against baselines and integrity rules."""

    if unit_of_work_factory is None:
        _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyInspectionUnitOfWork
    with effective_uow() as uow:
        return grade_registry(uow.repositories.inspector, config or get_validation_config())
