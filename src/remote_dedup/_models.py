"""Immutable records and derived report models."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one scanned file.

    :param path: Full logical location, relative to the lister root.
    :param size: File size in bytes.
    :param fingerprint: Content-derived key. Equal fingerprints mean equal content.
    """

    path: str
    size: int
    fingerprint: str

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"size must be non-negative, got {self.size} for {self.path!r}")


@dataclasses.dataclass(frozen=True)
class Duplication:
    """A fingerprint group that still holds two or more files after filtering.

    The first entry of ``files`` is the implicit keeper and is excluded from
    ``duplicate_count`` and ``duplicate_size``. Which file lands there depends
    on discovery order only.

    :param fingerprint: The shared content fingerprint.
    :param files: Surviving files, in discovery order.
    """

    fingerprint: str
    files: tuple[FileRecord, ...]

    @property
    def duplicate_count(self) -> int:
        """Number of redundant copies."""
        return len(self.files) - 1

    @property
    def duplicate_size(self) -> int:
        """Bytes that could be reclaimed by keeping only the first file."""
        return sum(f.size for f in self.files[1:])


@dataclasses.dataclass(frozen=True)
class DuplicateReport:
    """Ranked result of one analysis run.

    :param duplications: Groups ordered by ``duplicate_size``, largest first.
    :param total_duplicate_count: Sum of every group's ``duplicate_count``.
    :param total_duplicate_size: Sum of every group's ``duplicate_size``.
    """

    duplications: tuple[Duplication, ...] = ()
    total_duplicate_count: int = 0
    total_duplicate_size: int = 0
