"""Duplicate analyzer — turns a manifest into a ranked report."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from remote_dedup._filters import FilterPolicy
from remote_dedup._models import DuplicateReport, Duplication

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from remote_dedup._models import FileRecord

log = logging.getLogger(__name__)


def analyze_duplicates(
    manifest: Mapping[str, Sequence[FileRecord]],
    policy: FilterPolicy | None = None,
) -> DuplicateReport:
    """Find every fingerprint group with at least two retainable files.

    Buckets are filtered with ``policy``; a bucket survives when two or more
    records remain. Groups are ranked by reclaimable bytes, largest first.
    The order among groups of equal size is unspecified. ``manifest`` is not
    modified.

    :param manifest: Fingerprint to records mapping, typically a :class:`Manifest`.
    :param policy: Exclusion rules. Defaults to :class:`FilterPolicy` with its
        1000 byte threshold.
    """
    policy = policy or FilterPolicy()
    duplications: list[Duplication] = []
    total_count = 0
    total_size = 0
    for fingerprint, records in manifest.items():
        if len(records) <= 1:
            continue
        kept = policy.filter(records)
        if len(kept) <= 1:
            continue
        if len({r.size for r in kept}) > 1:
            log.warning("Files sharing fingerprint %s differ in size: %s", fingerprint, [r.path for r in kept])
        duplication = Duplication(fingerprint=fingerprint, files=kept)
        total_count += duplication.duplicate_count
        total_size += duplication.duplicate_size
        duplications.append(duplication)

    duplications.sort(key=lambda d: d.duplicate_size, reverse=True)
    log.debug("Found %d duplicate groups (%d files, %d bytes)", len(duplications), total_count, total_size)
    return DuplicateReport(
        duplications=tuple(duplications),
        total_duplicate_count=total_count,
        total_duplicate_size=total_size,
    )
