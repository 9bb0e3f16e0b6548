from __future__ import annotations

import pytest

from renecsync.domain.reconciliation.batching import LinkReport, chunked


def test_chunked_splits_into_fixed_size_batches() -> None:
    assert list(chunked(range(5), 2)) == [[0, 1], [2, 3], [4]]
    assert list(chunked([], 3)) == []


def test_chunked_rejects_non_positive_sizes() -> None:
    with pytest.raises(ValueError, match="positive"):
        list(chunked([1], 0))


def test_link_report_splits_skipped_into_unresolved_and_duplicates() -> None:
    report = LinkReport(attempted=10, inserted=6, unresolved=3)

    assert report.skipped == 4
    assert report.duplicates == 1
