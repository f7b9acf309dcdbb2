"""Scan coordinator — runs a lister on a worker thread with live progress."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from remote_dedup._errors import RemoteDedupError, ScanFailed
from remote_dedup._manifest import ManifestBuilder
from remote_dedup._progress import DEFAULT_QUEUE_SIZE, ProgressRelay

if TYPE_CHECKING:
    from remote_dedup._lister import Lister
    from remote_dedup._manifest import Manifest
    from remote_dedup._types import ProgressSink

log = logging.getLogger(__name__)


class _ScanTask:
    """Worker-thread body. Its result is read only after ``join()``."""

    def __init__(self, lister: Lister, root_path: str, publish: ProgressSink) -> None:
        self._lister = lister
        self._root_path = root_path
        self._publish = publish
        self.manifest: Manifest | None = None
        self.error: BaseException | None = None

    def __call__(self) -> None:
        try:
            self.manifest = ManifestBuilder().build(self._lister.list_files(self._root_path), progress=self._publish)
        except BaseException as exc:  # noqa: BLE001 -- re-raised on the coordinating thread
            self.error = exc


def _discard(count: int) -> None:
    pass


def scan(
    lister: Lister,
    root_path: str = "",
    *,
    progress: ProgressSink | None = None,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> Manifest:
    """Build a manifest of ``root_path`` while reporting progress.

    The listing runs on its own thread. Counts travel to ``progress`` through a
    :class:`ProgressRelay`, which is closed only after the worker thread has
    been joined, so ``progress`` always sees the final count.

    :param lister: Source of file records.
    :param root_path: Subtree to scan. Empty string for the whole tree.
    :param progress: Called on the relay thread with files-seen-so-far.
    :param queue_size: Maximum number of pending progress counts.
    :raises ScanFailed: If listing fails. No partial manifest is returned.
    """
    relay = ProgressRelay(progress or _discard, maxsize=queue_size)
    task = _ScanTask(lister, root_path, relay.publish)
    worker = threading.Thread(target=task, name=f"scan-{lister.name}", daemon=True)

    log.info("Scanning %s root %r", lister.name, root_path or "/")
    with relay:
        worker.start()
        worker.join()

    error = task.error
    if error is not None:
        if not isinstance(error, Exception):
            raise error
        if isinstance(error, RemoteDedupError):
            message = error.args[0] if error.args else type(error).__name__
            raise ScanFailed(message, path=error.path, lister=lister.name) from error
        raise ScanFailed(f"{type(error).__name__}: {error}", lister=lister.name) from error

    manifest = task.manifest
    if manifest is None:
        raise ScanFailed("Scan worker ended without producing a manifest", lister=lister.name)
    log.info("Scan finished: %d files, %d fingerprints", manifest.file_count, len(manifest))
    return manifest
