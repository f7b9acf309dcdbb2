"""Manifest — fingerprint-keyed inventory of one scan."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from remote_dedup._models import FileRecord
    from remote_dedup._types import ProgressSink


class Manifest(Mapping[str, "tuple[FileRecord, ...]"]):
    """Read-only mapping of fingerprint to the files sharing it.

    Records inside a bucket keep their discovery order. Bucket order follows
    the order in which fingerprints were first seen.

    :param buckets: Mapping of fingerprint to records. Copied on construction.
    """

    __slots__ = ("_buckets",)

    def __init__(self, buckets: Mapping[str, Iterable[FileRecord]] | None = None) -> None:
        self._buckets: dict[str, tuple[FileRecord, ...]] = {
            fingerprint: tuple(records) for fingerprint, records in (buckets or {}).items()
        }

    @classmethod
    def from_records(cls, records: Iterable[FileRecord]) -> Manifest:
        """Group ``records`` by fingerprint without progress reporting."""
        return ManifestBuilder().build(records)

    def __getitem__(self, fingerprint: str) -> tuple[FileRecord, ...]:
        return self._buckets[fingerprint]

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"Manifest(fingerprints={len(self._buckets)}, files={self.file_count})"

    @property
    def file_count(self) -> int:
        """Number of records across all buckets."""
        return sum(len(records) for records in self._buckets.values())

    @property
    def total_size(self) -> int:
        """Combined size of every record in bytes."""
        return sum(r.size for records in self._buckets.values() for r in records)


class ManifestBuilder:
    """Consumes a stream of records and groups them into a :class:`Manifest`.

    A builder holds no state between calls; each :meth:`build` starts from an
    empty manifest.
    """

    def build(self, records: Iterable[FileRecord], progress: ProgressSink | None = None) -> Manifest:
        """Drain ``records`` into a new manifest.

        :param records: Source of records, possibly unbounded and lazily fetched.
        :param progress: Optional sink receiving the running record count after
            each record. The last call always carries the final count.
        :raises Exception: Whatever the source raises. The partial manifest is
            discarded.
        """
        buckets: dict[str, list[FileRecord]] = {}
        count = 0
        for record in records:
            buckets.setdefault(record.fingerprint, []).append(record)
            count += 1
            if progress is not None:
                progress(count)
        return Manifest(buckets)
