"""Tests for the lister registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from remote_dedup._config import ListerConfig
from remote_dedup._errors import ConfigurationError
from remote_dedup._lister import Lister
from remote_dedup._registry import _LISTER_FACTORIES, create_lister, register_lister, registered_types
from remote_dedup.listers import LocalLister, S3Lister, SFTPLister

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from remote_dedup._models import FileRecord


class _NullLister(Lister):
    def __init__(self, label: str = "") -> None:
        self.label = label

    @property
    def name(self) -> str:
        return "null"

    def list_files(self, path: str = "") -> Iterator[FileRecord]:
        return iter(())


@pytest.fixture
def null_registered() -> Iterator[None]:
    register_lister("null", _NullLister)
    yield
    _LISTER_FACTORIES.pop("null", None)


class TestBuiltins:
    def test_builtin_types(self) -> None:
        assert {"local", "s3", "sftp"} <= set(registered_types())

    def test_create_local(self, tmp_path: Path) -> None:
        lister = create_lister(ListerConfig(type="local", options={"root": str(tmp_path)}))
        assert isinstance(lister, LocalLister)
        assert lister.name == "local"

    def test_create_s3_is_lazy(self) -> None:
        lister = create_lister(ListerConfig(type="s3", options={"bucket": "b"}))
        assert isinstance(lister, S3Lister)

    def test_create_sftp_is_lazy(self) -> None:
        lister = create_lister(ListerConfig(type="sftp", options={"host": "example.com"}))
        assert isinstance(lister, SFTPLister)


class TestErrors:
    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown lister type 'gdrive'"):
            create_lister(ListerConfig(type="gdrive"))

    def test_unexpected_option(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid options"):
            create_lister(ListerConfig(type="local", options={"root": str(tmp_path), "colour": "blue"}))

    def test_constructor_value_error(self) -> None:
        with pytest.raises(ConfigurationError, match="bucket"):
            create_lister(ListerConfig(type="s3", options={"bucket": ""}))


class TestCustomListers:
    def test_register_and_create(self, null_registered: None) -> None:
        lister = create_lister(ListerConfig(type="null", options={"label": "x"}))
        assert isinstance(lister, _NullLister)
        assert lister.label == "x"
        assert "null" in registered_types()
