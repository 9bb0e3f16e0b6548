"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import and_, distinct, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite

from renecsync.adapters.sqlalchemy.mappings import (
    TABLE_BY_ENTITY,
    accreditation_table,
    center_table,
    certifier_table,
    committee_table,
    occupation_table,
    offering_table,
    sector_table,
    standard_table,
)
from renecsync.domain.model import (
    Center,
    Certifier,
    Committee,
    RegistryEntity,
    Sector,
    Standard,
    SyncJob,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)

_SERVER_MANAGED_COLUMNS: Final = frozenset({"created_at"})


class UnsupportedDialectError(RuntimeError):
    """Raised when upserts are requested on a backend without ON CONFLICT support."""


def _dialect_insert(session: Session, table: Table) -> sqlite.Insert | postgresql.Insert:
    dialect = session.get_bind().dialect.name
    if dialect == "sqlite":
        return sqlite.insert(table)
    if dialect == "postgresql":
        return postgresql.insert(table)
    raise UnsupportedDialectError(f"Upserts are not supported for dialect {dialect!r}")


def _row_for(table: Table, entity: object) -> dict[str, Any]:
    return {
        column.key: getattr(entity, column.key)
        for column in table.columns
        if column.key not in _SERVER_MANAGED_COLUMNS
    }


class SqlAlchemyNaturalKeyRepository[TEntity, TKey]:
    """Upsert rows by a unique natural key column.

    New rows keep the identity carried by the entity; rows that already exist keep their
    stored identity and have every other column refreshed from the entity.
    """

    def __init__(self, session: Session, table: Table, key_column: str) -> None:
        self.session = session
        self._table = table
        self._key_column = key_column

    def upsert_many(self, entities: Sequence[TEntity]) -> dict[TKey, uuid.UUID]:
        if not entities:
            return {}
        # one row per key: a single statement must not touch the same row twice
        rows_by_key: dict[TKey, dict[str, Any]] = {}
        for entity in entities:
            row = _row_for(self._table, entity)
            rows_by_key[row[self._key_column]] = row

        stmt = _dialect_insert(self.session, self._table)
        first_row = next(iter(rows_by_key.values()))
        refreshed = {
            name: stmt.excluded[name]
            for name in first_row
            if name not in {"id", self._key_column}
        }
        stmt = stmt.on_conflict_do_update(index_elements=[self._key_column], set_=refreshed)
        self.session.execute(stmt, list(rows_by_key.values()))
        return self._identities_for(list(rows_by_key))

    def identity_map(self) -> dict[TKey, uuid.UUID]:
        key = self._table.c[self._key_column]
        rows = self.session.execute(select(key, self._table.c.id)).all()
        return {row[0]: row[1] for row in rows}

    def _identities_for(self, keys: Sequence[TKey]) -> dict[TKey, uuid.UUID]:
        key = self._table.c[self._key_column]
        stmt = select(key, self._table.c.id).where(key.in_(keys))
        return {row[0]: row[1] for row in self.session.execute(stmt).all()}


class SqlAlchemySectorRepository(SqlAlchemyNaturalKeyRepository[Sector, int]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, sector_table, "sector_key")


class SqlAlchemyCommitteeRepository(SqlAlchemyNaturalKeyRepository[Committee, str]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, committee_table, "committee_key")


class SqlAlchemyStandardRepository(SqlAlchemyNaturalKeyRepository[Standard, str]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, standard_table, "code")


class SqlAlchemyCertifierRepository(SqlAlchemyNaturalKeyRepository[Certifier, str]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, certifier_table, "certifier_key")


class SqlAlchemyCenterRepository(SqlAlchemyNaturalKeyRepository[Center, str]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, center_table, "center_key")


class SqlAlchemyPairRepository[TLeft, TRight]:
    """Insert join rows identified by a two-column unique pair, skipping existing ones."""

    def __init__(
        self,
        session: Session,
        table: Table,
        columns: tuple[str, str],
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self.session = session
        self._table = table
        self._columns = columns
        self._defaults = dict(defaults or {})

    def insert_missing(self, pairs: Sequence[tuple[TLeft, TRight]]) -> int:
        unique_pairs = list(dict.fromkeys(pairs))
        if not unique_pairs:
            return 0
        left, right = self._columns
        rows = [
            {"id": uuid.uuid4(), left: first, right: second, **self._defaults}
            for first, second in unique_pairs
        ]
        before = self._count()
        stmt = _dialect_insert(self.session, self._table).on_conflict_do_nothing(
            index_elements=[left, right]
        )
        self.session.execute(stmt, rows)
        inserted = self._count() - before
        log.debug(
            "%s: %d of %d pair(s) inserted", self._table.name, inserted, len(unique_pairs)
        )
        return inserted

    def _count(self) -> int:
        stmt = select(func.count()).select_from(self._table)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyAccreditationRepository(SqlAlchemyPairRepository[uuid.UUID, uuid.UUID]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            accreditation_table,
            ("standard_id", "certifier_id"),
            defaults={"is_valid": True},
        )


class SqlAlchemyOfferingRepository(SqlAlchemyPairRepository[uuid.UUID, uuid.UUID]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            offering_table,
            ("center_id", "standard_id"),
            defaults={"is_active": True},
        )


class SqlAlchemyOccupationRepository(SqlAlchemyPairRepository[uuid.UUID, str]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, occupation_table, ("standard_id", "occupation"))


class SqlAlchemySyncJobRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, job: SyncJob) -> None:
        self.session.add(job)


class SqlAlchemyRegistryInspector:
    """Aggregate queries over the registry tables."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def count(self, entity: RegistryEntity) -> int:
        stmt = select(func.count()).select_from(TABLE_BY_ENTITY[entity])
        return int(self.session.execute(stmt).scalar_one())

    def count_populated(self, entity: RegistryEntity, field: str) -> int:
        table = TABLE_BY_ENTITY[entity]
        stmt = select(func.count()).select_from(table).where(table.c[field].is_not(None))
        return int(self.session.execute(stmt).scalar_one())

    def standard_codes(self) -> list[str]:
        stmt = select(standard_table.c.code).order_by(standard_table.c.code)
        return list(self.session.execute(stmt).scalars())

    def count_orphans(
        self,
        entity: RegistryEntity,
        references: Mapping[str, RegistryEntity],
    ) -> int:
        table = TABLE_BY_ENTITY[entity]
        conditions = []
        for column_name, target in references.items():
            column = table.c[column_name]
            target_table = TABLE_BY_ENTITY[target]
            target_exists = select(target_table.c.id).where(target_table.c.id == column).exists()
            conditions.append(and_(column.is_not(None), ~target_exists))
        if not conditions:
            return 0
        stmt = select(func.count()).select_from(table).where(or_(*conditions))
        return int(self.session.execute(stmt).scalar_one())

    def count_distinct(self, entity: RegistryEntity, field: str) -> int:
        table = TABLE_BY_ENTITY[entity]
        stmt = select(func.count(distinct(table.c[field])))
        return int(self.session.execute(stmt).scalar_one())

    def table_counts(self, entities: Iterable[RegistryEntity]) -> dict[RegistryEntity, int]:
        return {entity: self.count(entity) for entity in entities}
