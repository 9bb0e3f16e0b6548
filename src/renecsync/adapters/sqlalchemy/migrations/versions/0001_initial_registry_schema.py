"""initial registry schema

Revision ID: 0001_initial_registry_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_registry_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_CERTIFIER_TYPES = ("ECE", "OC")
_SYNC_JOB_TYPES = ("FULL_SYNC",)
_SYNC_JOB_STATUSES = ("COMPLETED", "COMPLETED_WITH_ERRORS")


def _utc() -> sa.DateTime:
    return sa.DateTime(timezone=True)


def _sync_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("source_url", sa.String(), nullable=True),
        sa.Column("content_hash", sa.String(length=64), nullable=True),
        sa.Column("last_synced_at", _utc(), nullable=False),
        sa.Column("created_at", _utc(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "sector",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sector_key", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), server_default="productivo", nullable=False),
        *_sync_columns(),
        sa.PrimaryKeyConstraint("id", name="pk_sector"),
        sa.UniqueConstraint("sector_key", name="uq_sector_sector_key"),
    )

    op.create_table(
        "committee",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("committee_key", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("president", sa.String(), nullable=True),
        sa.Column("vice_president", sa.String(), nullable=True),
        sa.Column("president_title", sa.String(), nullable=True),
        sa.Column("vice_president_title", sa.String(), nullable=True),
        sa.Column("contact", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phones", sa.String(), nullable=True),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("street", sa.String(), nullable=True),
        sa.Column("neighborhood", sa.String(), nullable=True),
        sa.Column("postal_code", sa.String(length=10), nullable=True),
        sa.Column("locality", sa.String(), nullable=True),
        sa.Column("municipality", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("state_code", sa.String(length=2), nullable=True),
        sa.Column("committee_type", sa.Integer(), nullable=True),
        sa.Column("enrolled_at", _utc(), nullable=True),
        sa.Column("sector_id", sa.Uuid(), nullable=True),
        *_sync_columns(),
        sa.ForeignKeyConstraint(
            ["sector_id"],
            ["sector.id"],
            name="fk_committee_sector_id_sector",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_committee"),
        sa.UniqueConstraint("committee_key", name="uq_committee_committee_key"),
    )
    op.create_index("ix_committee_sector_id", "committee", ["sector_id"])

    op.create_table(
        "standard",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("level", sa.Integer(), nullable=True),
        sa.Column("is_valid", sa.Boolean(), nullable=False),
        sa.Column("sector_name", sa.String(), nullable=True),
        sa.Column("committee_id", sa.Uuid(), nullable=True),
        sa.Column("sector_id", sa.Uuid(), nullable=True),
        sa.Column("source_metadata", sa.JSON(), nullable=False),
        *_sync_columns(),
        sa.ForeignKeyConstraint(
            ["committee_id"],
            ["committee.id"],
            name="fk_standard_committee_id_committee",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["sector_id"],
            ["sector.id"],
            name="fk_standard_sector_id_sector",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_standard"),
        sa.UniqueConstraint("code", name="uq_standard_code"),
    )
    op.create_index("ix_standard_committee_id", "standard", ["committee_id"])
    op.create_index("ix_standard_sector_id", "standard", ["sector_id"])

    op.create_table(
        "certifier",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("certifier_key", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "entity_type",
            sa.Enum(*_CERTIFIER_TYPES, name="certifiertype", native_enum=False),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("alternate_names", sa.JSON(none_as_null=True), nullable=True),
        sa.Column("normalized_key", sa.String(), nullable=True),
        *_sync_columns(),
        sa.PrimaryKeyConstraint("id", name="pk_certifier"),
        sa.UniqueConstraint("certifier_key", name="uq_certifier_certifier_key"),
    )
    op.create_index("ix_certifier_normalized_key", "certifier", ["normalized_key"])

    op.create_table(
        "center",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("center_key", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("alternate_names", sa.JSON(none_as_null=True), nullable=True),
        sa.Column("normalized_key", sa.String(), nullable=True),
        *_sync_columns(),
        sa.PrimaryKeyConstraint("id", name="pk_center"),
        sa.UniqueConstraint("center_key", name="uq_center_center_key"),
    )
    op.create_index("ix_center_normalized_key", "center", ["normalized_key"])

    op.create_table(
        "standard_occupation",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("standard_id", sa.Uuid(), nullable=False),
        sa.Column("occupation", sa.String(), nullable=False),
        sa.Column("created_at", _utc(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["standard_id"],
            ["standard.id"],
            name="fk_standard_occupation_standard_id_standard",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_standard_occupation"),
        sa.UniqueConstraint("standard_id", "occupation", name="uq_standard_occupation_pair"),
    )
    op.create_index(
        "ix_standard_occupation_standard_id", "standard_occupation", ["standard_id"]
    )

    op.create_table(
        "accreditation",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("standard_id", sa.Uuid(), nullable=False),
        sa.Column("certifier_id", sa.Uuid(), nullable=False),
        sa.Column("is_valid", sa.Boolean(), nullable=False),
        sa.Column("created_at", _utc(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["standard_id"],
            ["standard.id"],
            name="fk_accreditation_standard_id_standard",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["certifier_id"],
            ["certifier.id"],
            name="fk_accreditation_certifier_id_certifier",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_accreditation"),
        sa.UniqueConstraint("standard_id", "certifier_id", name="uq_accreditation_pair"),
    )
    op.create_index("ix_accreditation_standard_id", "accreditation", ["standard_id"])
    op.create_index("ix_accreditation_certifier_id", "accreditation", ["certifier_id"])

    op.create_table(
        "offering",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("center_id", sa.Uuid(), nullable=False),
        sa.Column("standard_id", sa.Uuid(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", _utc(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ["center_id"],
            ["center.id"],
            name="fk_offering_center_id_center",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["standard_id"],
            ["standard.id"],
            name="fk_offering_standard_id_standard",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_offering"),
        sa.UniqueConstraint("center_id", "standard_id", name="uq_offering_pair"),
    )
    op.create_index("ix_offering_center_id", "offering", ["center_id"])
    op.create_index("ix_offering_standard_id", "offering", ["standard_id"])

    op.create_table(
        "sync_job",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "job_type",
            sa.Enum(*_SYNC_JOB_TYPES, name="syncjobtype", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*_SYNC_JOB_STATUSES, name="syncjobstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("started_at", _utc(), nullable=False),
        sa.Column("completed_at", _utc(), nullable=True),
        sa.Column("items_processed", sa.Integer(), nullable=False),
        sa.Column("items_created", sa.Integer(), nullable=False),
        sa.Column("items_updated", sa.Integer(), nullable=False),
        sa.Column("items_skipped", sa.Integer(), nullable=False),
        sa.Column("errors", sa.JSON(), nullable=False),
        sa.Column("stats", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_sync_job"),
    )


def downgrade() -> None:
    op.drop_table("sync_job")
    op.drop_index("ix_offering_standard_id", table_name="offering")
    op.drop_index("ix_offering_center_id", table_name="offering")
    op.drop_table("offering")
    op.drop_index("ix_accreditation_certifier_id", table_name="accreditation")
    op.drop_index("ix_accreditation_standard_id", table_name="accreditation")
    op.drop_table("accreditation")
    op.drop_index("ix_standard_occupation_standard_id", table_name="standard_occupation")
    op.drop_table("standard_occupation")
    op.drop_index("ix_center_normalized_key", table_name="center")
    op.drop_table("center")
    op.drop_index("ix_certifier_normalized_key", table_name="certifier")
    op.drop_table("certifier")
    op.drop_index("ix_standard_sector_id", table_name="standard")
    op.drop_index("ix_standard_committee_id", table_name="standard")
    op.drop_table("standard")
    op.drop_index("ix_committee_sector_id", table_name="committee")
    op.drop_table("committee")
    op.drop_table("sector")
