"""Registry reconciliation: resolvers, graph builder, ledger and the pipeline running them."""

from __future__ import annotations

from .batching import LinkReport, RecordStepReport, chunked
from .committees import inegi_state_code, parse_registry_timestamp, resolve_committees
from .fingerprint import content_fingerprint
from .graph import build_accreditations, build_offerings
from .key_index import CanonicalKeyIndex, ResolvedIdentities
from .ledger import SyncStats, record_sync_job
from .organizations import classify_certifier_type, resolve_centers, resolve_certifiers
from .pipeline import RegistrySyncResult, SyncOptions, sync_registry
from .sectors import resolve_sectors
from .standards import attach_occupations, resolve_standards

__all__ = [
    "CanonicalKeyIndex",
    "LinkReport",
    "RecordStepReport",
    "RegistrySyncResult",
    "ResolvedIdentities",
    "SyncOptions",
    "SyncStats",
    "attach_occupations",
    "build_accreditations",
    "build_offerings",
    "chunked",
    "classify_certifier_type",
    "content_fingerprint",
    "inegi_state_code",
    "parse_registry_timestamp",
    "record_sync_job",
    "resolve_centers",
    "resolve_certifiers",
    "resolve_committees",
    "resolve_sectors",
    "resolve_standards",
    "sync_registry",
]
