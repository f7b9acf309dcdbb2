"""Tests for configuration."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

import pytest

from remote_dedup._config import DedupConfig, ListerConfig, ScanConfig
from remote_dedup._errors import ConfigurationError
from remote_dedup._filters import FilterPolicy

if TYPE_CHECKING:
    from pathlib import Path


class TestListerConfig:
    def test_defaults(self) -> None:
        lc = ListerConfig()
        assert lc.type == "local"
        assert lc.options == {}

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ListerConfig().type = "s3"  # type: ignore[misc]


class TestScanConfig:
    def test_defaults(self) -> None:
        sc = ScanConfig()
        assert sc.root_path == ""
        assert sc.min_size == 1000
        assert sc.ignore_hidden is False
        assert sc.ignore_patterns == ()

    def test_filter_policy(self) -> None:
        sc = ScanConfig(min_size=10, ignore_hidden=True, ignore_patterns=("*.tmp",))
        assert sc.filter_policy() == FilterPolicy(min_size=10, ignore_hidden=True, ignore_patterns=("*.tmp",))

    def test_validate_rejects_negative_min_size(self) -> None:
        with pytest.raises(ConfigurationError, match="min_size"):
            ScanConfig(min_size=-5).validate()

    def test_validate_rejects_zero_queue(self) -> None:
        with pytest.raises(ConfigurationError, match="progress_queue_size"):
            ScanConfig(progress_queue_size=0).validate()


class TestFromDict:
    def test_full(self) -> None:
        config = DedupConfig.from_dict(
            {
                "lister": {"type": "s3", "options": {"bucket": "backups"}},
                "scan": {"root_path": "photos", "min_size": 4096, "ignore_hidden": True, "ignore_patterns": ["*.tmp"]},
            }
        )
        assert config.lister == ListerConfig(type="s3", options={"bucket": "backups"})
        assert config.scan.root_path == "photos"
        assert config.scan.min_size == 4096
        assert config.scan.ignore_hidden is True
        assert config.scan.ignore_patterns == ("*.tmp",)

    def test_empty(self) -> None:
        assert DedupConfig.from_dict({}) == DedupConfig()

    def test_non_table_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            DedupConfig.from_dict({"lister": "local"})

    def test_unknown_scan_key_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="min_szie"):
            DedupConfig.from_dict({"scan": {"min_szie": 10}})

    def test_bad_min_size_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            DedupConfig.from_dict({"scan": {"min_size": "big"}})

    def test_string_patterns_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="ignore_patterns"):
            DedupConfig.from_dict({"scan": {"ignore_patterns": "*.tmp"}})

    def test_empty_lister_type_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            DedupConfig.from_dict({"lister": {"type": ""}})


class TestFromToml:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "dedup.toml"
        path.write_text(
            '[lister]\ntype = "sftp"\n\n[lister.options]\nhost = "files.example.com"\nport = 2222\n\n'
            '[scan]\nmin_size = 1\nignore_patterns = [".DS_Store"]\n',
            encoding="utf-8",
        )
        config = DedupConfig.from_toml(path)
        assert config.lister.type == "sftp"
        assert config.lister.options == {"host": "files.example.com", "port": 2222}
        assert config.scan.min_size == 1
        assert config.scan.ignore_patterns == (".DS_Store",)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read") as exc_info:
            DedupConfig.from_toml(tmp_path / "absent.toml")
        assert exc_info.value.path is not None

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[scan\nmin_size = ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Malformed"):
            DedupConfig.from_toml(path)
