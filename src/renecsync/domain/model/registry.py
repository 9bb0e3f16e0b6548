"""Canonical registry entities.

Entities are plain dataclasses keyed by an internal UUID (the canonical identity) and a
natural key supplied by the source registry. Persistence adapters map them
imperatively, so nothing here knows about storage.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .enums import CertifierType, SyncJobStatus, SyncJobType

DEFAULT_SECTOR_CATEGORY = "productivo"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class Sector:
    sector_key: int
    name: str
    category: str = DEFAULT_SECTOR_CATEGORY
    source_url: str | None = None
    content_hash: str | None = None
    last_synced_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Committee:
    committee_key: str
    name: str
    president: str | None = None
    vice_president: str | None = None
    president_title: str | None = None
    vice_president_title: str | None = None
    contact: str | None = None
    email: str | None = None
    phones: str | None = None
    url: str | None = None
    street: str | None = None
    neighborhood: str | None = None
    postal_code: str | None = None
    locality: str | None = None
    municipality: str | None = None
    state: str | None = None
    state_code: str | None = None
    committee_type: int | None = None
    enrolled_at: datetime | None = None
    sector_id: uuid.UUID | None = None
    source_url: str | None = None
    content_hash: str | None = None
    last_synced_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Standard:
    code: str
    title: str
    level: int | None = None
    is_valid: bool = True
    sector_name: str | None = None
    committee_id: uuid.UUID | None = None
    sector_id: uuid.UUID | None = None
    source_metadata: dict[str, Any] = field(default_factory=dict[str, Any])
    source_url: str | None = None
    content_hash: str | None = None
    last_synced_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Certifier:
    certifier_key: str
    name: str
    entity_type: CertifierType = CertifierType.ECE
    is_active: bool = True
    alternate_names: list[str] | None = None
    normalized_key: str | None = None
    source_url: str | None = None
    content_hash: str | None = None
    last_synced_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Center:
    center_key: str
    name: str
    is_active: bool = True
    alternate_names: list[str] | None = None
    normalized_key: str | None = None
    source_url: str | None = None
    content_hash: str | None = None
    last_synced_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Occupation:
    standard_id: uuid.UUID
    occupation: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Accreditation:
    standard_id: uuid.UUID
    certifier_id: uuid.UUID
    is_valid: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class Offering:
    center_id: uuid.UUID
    standard_id: uuid.UUID
    is_active: bool = True
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(eq=False, kw_only=True)
class SyncJob:
    """Ledger entry describing one completed sync run."""

    started_at: datetime
    completed_at: datetime
    job_type: SyncJobType = SyncJobType.FULL_SYNC
    status: SyncJobStatus = SyncJobStatus.COMPLETED
    items_processed: int = 0
    items_created: int = 0
    items_updated: int = 0
    items_skipped: int = 0
    errors: list[str] = field(default_factory=list[str])
    stats: dict[str, int] = field(default_factory=dict[str, int])
    id: uuid.UUID = field(default_factory=uuid.uuid4)
