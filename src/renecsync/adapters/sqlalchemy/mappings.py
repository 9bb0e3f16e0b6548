"""SQLAlchemy mapping metadata for the registry domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from renecsync.domain.model import (
    Accreditation,
    Center,
    Certifier,
    CertifierType,
    Committee,
    Occupation,
    Offering,
    RegistryEntity,
    Sector,
    Standard,
    SyncJob,
    SyncJobStatus,
    SyncJobType,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
NullableJSON = JSON(none_as_null=True)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _sync_columns() -> tuple[Column[object], ...]:
    return (
        Column("source_url", String, nullable=True),
        Column("content_hash", String(64), nullable=True),
        Column("last_synced_at", UTCDateTime(), nullable=False),
        Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    )


# Entity tables ---------------------------------------------------------------

sector_table = Table(
    "sector",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("sector_key", Integer, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("category", String, nullable=False, server_default="productivo"),
    *_sync_columns(),
)

committee_table = Table(
    "committee",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("committee_key", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("president", String, nullable=True),
    Column("vice_president", String, nullable=True),
    Column("president_title", String, nullable=True),
    Column("vice_president_title", String, nullable=True),
    Column("contact", String, nullable=True),
    Column("email", String, nullable=True),
    Column("phones", String, nullable=True),
    Column("url", String, nullable=True),
    Column("street", String, nullable=True),
    Column("neighborhood", String, nullable=True),
    Column("postal_code", String(10), nullable=True),
    Column("locality", String, nullable=True),
    Column("municipality", String, nullable=True),
    Column("state", String, nullable=True),
    Column("state_code", String(2), nullable=True),
    Column("committee_type", Integer, nullable=True),
    Column("enrolled_at", UTCDateTime(), nullable=True),
    Column(
        "sector_id",
        UUIDColumnType,
        ForeignKey("sector.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    *_sync_columns(),
)

standard_table = Table(
    "standard",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("code", String, nullable=False, unique=True),
    Column("title", String, nullable=False),
    Column("level", Integer, nullable=True),
    Column("is_valid", Boolean, nullable=False, default=True),
    Column("sector_name", String, nullable=True),
    Column(
        "committee_id",
        UUIDColumnType,
        ForeignKey("committee.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column(
        "sector_id",
        UUIDColumnType,
        ForeignKey("sector.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column("source_metadata", JSON, nullable=False, default=dict),
    *_sync_columns(),
)

certifier_table = Table(
    "certifier",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("certifier_key", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("entity_type", Enum(CertifierType, native_enum=False), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("alternate_names", NullableJSON, nullable=True),
    Column("normalized_key", String, nullable=True),
    *_sync_columns(),
    Index("ix_certifier_normalized_key", "normalized_key"),
)

center_table = Table(
    "center",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("center_key", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("alternate_names", NullableJSON, nullable=True),
    Column("normalized_key", String, nullable=True),
    *_sync_columns(),
    Index("ix_center_normalized_key", "normalized_key"),
)

# Join tables -----------------------------------------------------------------

occupation_table = Table(
    "standard_occupation",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "standard_id",
        UUIDColumnType,
        ForeignKey("standard.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("occupation", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    UniqueConstraint("standard_id", "occupation", name="uq_standard_occupation_pair"),
)

accreditation_table = Table(
    "accreditation",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "standard_id",
        UUIDColumnType,
        ForeignKey("standard.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "certifier_id",
        UUIDColumnType,
        ForeignKey("certifier.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("is_valid", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    UniqueConstraint("standard_id", "certifier_id", name="uq_accreditation_pair"),
)

offering_table = Table(
    "offering",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "center_id",
        UUIDColumnType,
        ForeignKey("center.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "standard_id",
        UUIDColumnType,
        ForeignKey("standard.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    UniqueConstraint("center_id", "standard_id", name="uq_offering_pair"),
)

# Ledger ----------------------------------------------------------------------

sync_job_table = Table(
    "sync_job",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("job_type", Enum(SyncJobType, native_enum=False), nullable=False),
    Column("status", Enum(SyncJobStatus, native_enum=False), nullable=False),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("completed_at", UTCDateTime(), nullable=True),
    Column("items_processed", Integer, nullable=False, default=0),
    Column("items_created", Integer, nullable=False, default=0),
    Column("items_updated", Integer, nullable=False, default=0),
    Column("items_skipped", Integer, nullable=False, default=0),
    Column("errors", JSON, nullable=False, default=list),
    Column("stats", JSON, nullable=False, default=dict),
)

TABLE_BY_ENTITY: Final[dict[RegistryEntity, Table]] = {
    RegistryEntity.SECTOR: sector_table,
    RegistryEntity.COMMITTEE: committee_table,
    RegistryEntity.STANDARD: standard_table,
    RegistryEntity.CERTIFIER: certifier_table,
    RegistryEntity.CENTER: center_table,
    RegistryEntity.OCCUPATION: occupation_table,
    RegistryEntity.ACCREDITATION: accreditation_table,
    RegistryEntity.OFFERING: offering_table,
    RegistryEntity.SYNC_JOB: sync_job_table,
}

CLASS_BY_ENTITY: Final[dict[RegistryEntity, type[object]]] = {
    RegistryEntity.SECTOR: Sector,
    RegistryEntity.COMMITTEE: Committee,
    RegistryEntity.STANDARD: Standard,
    RegistryEntity.CERTIFIER: Certifier,
    RegistryEntity.CENTER: Center,
    RegistryEntity.OCCUPATION: Occupation,
    RegistryEntity.ACCREDITATION: Accreditation,
    RegistryEntity.OFFERING: Offering,
    RegistryEntity.SYNC_JOB: SyncJob,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for entity, entity_cls in CLASS_BY_ENTITY.items():
        mapper_registry.map_imperatively(
            entity_cls,
            TABLE_BY_ENTITY[entity],
            exclude_properties={"created_at"},
        )

    configure_mappers()
    return mapper_registry

