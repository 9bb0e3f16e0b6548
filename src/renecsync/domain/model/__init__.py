"""Public domain model API."""

from __future__ import annotations

from .enums import CertifierType, RegistryEntity, SyncJobStatus, SyncJobType
from .registry import (
    DEFAULT_SECTOR_CATEGORY,
    Accreditation,
    Center,
    Certifier,
    Committee,
    Occupation,
    Offering,
    Sector,
    Standard,
    SyncJob,
)

__all__ = [
    "DEFAULT_SECTOR_CATEGORY",
    "Accreditation",
    "Center",
    "Certifier",
    "CertifierType",
    "Committee",
    "Occupation",
    "Offering",
    "RegistryEntity",
    "Sector",
    "Standard",
    "SyncJob",
    "SyncJobStatus",
    "SyncJobType",
]
