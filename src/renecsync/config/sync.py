"""Synchronization defaults for registry sync runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .env import optional_env_int, optional_env_path
from .storage import StorageConfig, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

RENEC_SOURCE_URL: Final[str] = "https://conocer.gob.mx/conocer/#/renec"

DEFAULT_SECTOR_BATCH_SIZE = 50
DEFAULT_COMMITTEE_BATCH_SIZE = 50
DEFAULT_STANDARD_BATCH_SIZE = 100
DEFAULT_ORGANIZATION_BATCH_SIZE = 50
DEFAULT_LINK_BATCH_SIZE = 200


@dataclass(frozen=True, slots=True)
class SyncConfig:
    extracts_dir: Path
    source_url: str = RENEC_SOURCE_URL
    sector_batch_size: int = DEFAULT_SECTOR_BATCH_SIZE
    committee_batch_size: int = DEFAULT_COMMITTEE_BATCH_SIZE
    standard_batch_size: int = DEFAULT_STANDARD_BATCH_SIZE
    organization_batch_size: int = DEFAULT_ORGANIZATION_BATCH_SIZE
    link_batch_size: int = DEFAULT_LINK_BATCH_SIZE


def get_sync_config(*, storage: StorageConfig | None = None) -> SyncConfig:
    storage_config = storage or get_storage_config()
    extracts_dir = optional_env_path("RENECSYNC_EXTRACTS_DIR") or storage_config.extracts_dir()
    batch_size = optional_env_int("RENECSYNC_BATCH_SIZE")
    if batch_size is None:
        return SyncConfig(extracts_dir=extracts_dir)
    return SyncConfig(
        extracts_dir=extracts_dir,
        sector_batch_size=batch_size,
        committee_batch_size=batch_size,
        standard_batch_size=batch_size,
        organization_batch_size=batch_size,
    )
