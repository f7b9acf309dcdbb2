"""Local filesystem lister — stdlib-only reference implementation."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING

from remote_dedup._errors import InvalidPath, NotFound, PermissionDenied
from remote_dedup._lister import Lister
from remote_dedup._models import FileRecord
from remote_dedup._path import normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

_CHUNK_SIZE = 1 << 20


class LocalLister(Lister):
    """Lists a local directory tree, fingerprinting files with MD5.

    :param root: Path to the root directory on the local filesystem.
    """

    def __init__(self, root: str) -> None:
        self._root = Path(root).expanduser().resolve()

    def __repr__(self) -> str:
        return f"LocalLister(root={str(self._root)!r})"

    @property
    def name(self) -> str:
        return "local"

    def _resolve(self, path: str) -> Path:
        """Resolve a relative path to an absolute path within root.

        :raises InvalidPath: If the resolved path escapes the root.
        """
        resolved = (self._root / normalize_path(path)).resolve()
        try:
            resolved.relative_to(self._root)
        except ValueError:
            raise InvalidPath(f"Path escapes root directory: {path}", path=path, lister=self.name) from None
        return resolved

    def _key(self, full: Path) -> str:
        return normalize_path(full.relative_to(self._root).as_posix())

    @staticmethod
    def _fingerprint(full: Path) -> str:
        digest = hashlib.md5(usedforsecurity=False)
        with open(full, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()

    def list_files(self, path: str = "") -> Iterator[FileRecord]:
        full = self._resolve(path)
        if not full.is_dir():
            raise NotFound(f"Folder not found: {path}", path=path, lister=self.name)
        for item in full.rglob("*"):
            if item.is_symlink() or not item.is_file():
                continue
            key = self._key(item)
            try:
                size = item.stat().st_size
                fingerprint = self._fingerprint(item)
            except FileNotFoundError:
                # Removed between listing and hashing.
                continue
            except PermissionError:
                raise PermissionDenied(f"Permission denied: {key}", path=key, lister=self.name) from None
            yield FileRecord(path=key, size=size, fingerprint=fingerprint)
