"""In-memory lookup indexes shared across the resolver steps of one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from renecsync.domain.extracts import CommitteeRecord, StandardDetail, StandardDetailsFile

log = logging.getLogger(__name__)


class CanonicalKeyIndex:
    """Reverse lookups over already-loaded extracts.

    Every map is built on first access and cached for the lifetime of the index, so the
    index is safe to construct eagerly and cheap to query repeatedly. Construction has no
    side effects beyond DEBUG logging of conflicting associations.
    """

    def __init__(
        self,
        *,
        committees: Sequence[CommitteeRecord] | None = None,
        details: StandardDetailsFile | None = None,
    ) -> None:
        self._committees: tuple[CommitteeRecord, ...] = tuple(committees or ())
        self._details = details

    @cached_property
    def committees_by_key(self) -> dict[str, CommitteeRecord]:
        index: dict[str, CommitteeRecord] = {}
        for committee in self._committees:
            if committee.key is not None:
                index.setdefault(committee.key, committee)
        return index

    @cached_property
    def committee_by_standard_code(self) -> dict[str, CommitteeRecord]:
        """Map each associated standard code to the last committee listing it."""

        index: dict[str, CommitteeRecord] = {}
        for committee in self._committees:
            for associated in committee.associated_standards:
                if associated.code is None:
                    continue
                previous = index.get(associated.code)
                if previous is not None and previous is not committee:
                    log.debug(
                        "Standard %s listed by committees %s and %s; keeping %s",
                        associated.code,
                        previous.key,
                        committee.key,
                        committee.key,
                    )
                index[associated.code] = committee
        return index

    @cached_property
    def detail_by_standard_code(self) -> dict[str, StandardDetail]:
        if self._details is None:
            return {}
        return dict(self._details.ec_details)

    def committee_for_standard(self, code: str) -> CommitteeRecord | None:
        return self.committee_by_standard_code.get(code)

    def detail_for_standard(self, code: str) -> StandardDetail | None:
        return self.detail_by_standard_code.get(code)


@dataclass(slots=True)
class ResolvedIdentities:
    """Natural key to canonical identity maps filled in as resolvers complete."""

    sectors: dict[int, UUID] = field(default_factory=dict)
    committees: dict[str, UUID] = field(default_factory=dict)
    standards: dict[str, UUID] = field(default_factory=dict)
    certifiers: dict[str, UUID] = field(default_factory=dict)
    centers: dict[str, UUID] = field(default_factory=dict)
