"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

from remote_dedup._errors import (
    ConfigurationError,
    InvalidPath,
    ListerUnavailable,
    NotFound,
    PermissionDenied,
    RemoteDedupError,
    ScanFailed,
)


class TestBaseError:
    def test_default_attributes(self) -> None:
        e = RemoteDedupError("boom")
        assert e.path is None
        assert e.lister is None
        assert str(e) == "boom"

    def test_with_attributes(self) -> None:
        e = RemoteDedupError("boom", path="a/b.txt", lister="s3")
        assert str(e) == "boom | path='a/b.txt' | lister='s3'"

    def test_repr(self) -> None:
        assert repr(NotFound("missing", path="x")) == "NotFound('missing', path='x')"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [NotFound, PermissionDenied, InvalidPath, ListerUnavailable, ScanFailed, ConfigurationError],
    )
    def test_inherits_directly_from_base(self, cls: type[RemoteDedupError]) -> None:
        assert cls.__bases__ == (RemoteDedupError,)

    def test_scan_failed_chains_cause(self) -> None:
        cause = PermissionDenied("expired token", lister="s3")
        try:
            raise ScanFailed("expired token", lister="s3") from cause
        except ScanFailed as exc:
            assert exc.__cause__ is cause
