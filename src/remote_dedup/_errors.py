"""Normalized error hierarchy for remote_dedup."""

from __future__ import annotations

from typing import Optional


class RemoteDedupError(Exception):
    """Base class for all remote_dedup errors.

    :param message: Human-readable error description.
    :param path: The path involved in the error, if any.
    :param lister: The lister name involved, if any.
    """

    def __init__(self, message: str = "", *, path: Optional[str] = None, lister: Optional[str] = None) -> None:
        self.path = path
        self.lister = lister
        super().__init__(message)

    def _details(self) -> list[str]:
        details = []
        if self.path is not None:
            details.append(f"path={self.path!r}")
        if self.lister is not None:
            details.append(f"lister={self.lister!r}")
        return details

    def __str__(self) -> str:
        return " | ".join([super().__str__(), *self._details()])

    def __repr__(self) -> str:
        args = [repr(super().__str__()), *self._details()]
        return f"{type(self).__name__}({', '.join(args)})"


class NotFound(RemoteDedupError):
    """Raised when the scan root does not exist."""


class PermissionDenied(RemoteDedupError):
    """Raised when the storage service refuses access."""


class InvalidPath(RemoteDedupError):
    """Raised for malformed or unsafe paths."""


class ListerUnavailable(RemoteDedupError):
    """Raised when the storage service cannot be reached or initialized."""


class ScanFailed(RemoteDedupError):
    """Raised when a scan aborts; the cause is chained as ``__cause__``."""


class ConfigurationError(RemoteDedupError):
    """Raised for invalid configuration, before any scan starts."""
