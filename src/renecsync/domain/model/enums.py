"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CertifierType(StrEnum):
    """Closed classification of certifying bodies."""

    ECE = "ECE"  # Entidad de Certificación y Evaluación
    OC = "OC"  # Organismo Certificador


class SyncJobType(StrEnum):
    FULL_SYNC = "FULL_SYNC"


class SyncJobStatus(StrEnum):
    COMPLETED = "COMPLETED"
    COMPLETED_WITH_ERRORS = "COMPLETED_WITH_ERRORS"


class RegistryEntity(StrEnum):
    """Discriminator for every persisted registry table."""

    SECTOR = "sector"
    COMMITTEE = "committee"
    STANDARD = "standard"
    CERTIFIER = "certifier"
    CENTER = "center"
    OCCUPATION = "standard_occupation"
    ACCREDITATION = "accreditation"
    OFFERING = "offering"
    SYNC_JOB = "sync_job"
