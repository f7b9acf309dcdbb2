"""Lister abstract base class — the listing collaborator contract."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from remote_dedup._models import FileRecord


class Lister(abc.ABC):
    """Abstract base class for all listing collaborators.

    A lister walks one storage tree and yields a :class:`FileRecord` per file
    with its fingerprint already computed. Native exceptions must never leak:
    they are mapped to ``remote_dedup`` errors.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Unique identifier for this lister type (e.g. ``'local'``, ``'s3'``)."""

    @abc.abstractmethod
    def list_files(self, path: str = "") -> Iterator[FileRecord]:
        """Recursively list every file under ``path``.

        Record paths are relative to the lister root, not to ``path``.

        :param path: Subtree to scan. Empty string for the whole tree.
        :raises NotFound: If ``path`` does not exist.
        """

    def close(self) -> None:  # noqa: B027
        """Release resources. Default is a no-op."""

    def __enter__(self) -> Lister:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
