"""Filter policy — which files count toward duplication."""

from __future__ import annotations

import dataclasses
import fnmatch
from typing import TYPE_CHECKING

from remote_dedup._path import path_segments

if TYPE_CHECKING:
    from collections.abc import Iterable

    from remote_dedup._models import FileRecord

DEFAULT_MIN_SIZE = 1000


@dataclasses.dataclass(frozen=True)
class FilterPolicy:
    """Pure, per-file exclusion rules.

    A file is ignored when any enabled rule matches it. Every rule looks at a
    single record only.

    :param min_size: Files smaller than this many bytes are ignored.
    :param ignore_hidden: Ignore files with any path segment starting with ``.``.
    :param ignore_patterns: Glob patterns matched against the full path and
        against the file name.
    """

    min_size: int = DEFAULT_MIN_SIZE
    ignore_hidden: bool = False
    ignore_patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.min_size < 0:
            raise ValueError(f"min_size must be non-negative, got {self.min_size}")
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))

    def should_ignore(self, record: FileRecord) -> bool:
        """Return ``True`` if ``record`` must not be considered a duplicate."""
        if record.size < self.min_size:
            return True
        segments = path_segments(record.path)
        if self.ignore_hidden and any(s.startswith(".") for s in segments):
            return True
        if self.ignore_patterns:
            name = segments[-1] if segments else ""
            for pattern in self.ignore_patterns:
                if fnmatch.fnmatchcase(record.path, pattern) or fnmatch.fnmatchcase(name, pattern):
                    return True
        return False

    def filter(self, records: Iterable[FileRecord]) -> tuple[FileRecord, ...]:
        """Keep the records that are not ignored, preserving order."""
        return tuple(r for r in records if not self.should_ignore(r))
