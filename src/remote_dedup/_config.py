"""Configuration model — immutable data containers describing a scan."""

from __future__ import annotations

import dataclasses
import sys
from typing import TYPE_CHECKING

from remote_dedup._errors import ConfigurationError
from remote_dedup._filters import DEFAULT_MIN_SIZE, FilterPolicy
from remote_dedup._progress import DEFAULT_QUEUE_SIZE

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

if TYPE_CHECKING:
    from remote_dedup._types import PathLike


@dataclasses.dataclass(frozen=True)
class ListerConfig:
    """Describes a lister instance.

    :param type: Lister type identifier (e.g. ``"local"``, ``"s3"``).
    :param options: Lister-specific constructor options.
    """

    type: str = "local"
    options: dict[str, object] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class ScanConfig:
    """Describes what to scan and which files count.

    :param root_path: Subtree to scan, relative to the lister root.
    :param min_size: Files below this many bytes are ignored.
    :param ignore_hidden: Ignore dotfiles and files in dot-directories.
    :param ignore_patterns: Glob patterns of files to ignore.
    :param progress_queue_size: Maximum number of pending progress counts.
    """

    root_path: str = ""
    min_size: int = DEFAULT_MIN_SIZE
    ignore_hidden: bool = False
    ignore_patterns: tuple[str, ...] = ()
    progress_queue_size: int = DEFAULT_QUEUE_SIZE

    def validate(self) -> None:
        """Check value ranges.

        :raises ConfigurationError: If a value is out of range.
        """
        if self.min_size < 0:
            raise ConfigurationError(f"min_size must be non-negative, got {self.min_size}")
        if self.progress_queue_size < 1:
            raise ConfigurationError(f"progress_queue_size must be at least 1, got {self.progress_queue_size}")

    def filter_policy(self) -> FilterPolicy:
        """Build the :class:`FilterPolicy` this config describes."""
        return FilterPolicy(
            min_size=self.min_size,
            ignore_hidden=self.ignore_hidden,
            ignore_patterns=self.ignore_patterns,
        )


@dataclasses.dataclass(frozen=True)
class DedupConfig:
    """Top-level configuration container.

    :param lister: Which storage tree to list.
    :param scan: Scan and filter settings.
    """

    lister: ListerConfig = dataclasses.field(default_factory=ListerConfig)
    scan: ScanConfig = dataclasses.field(default_factory=ScanConfig)

    def validate(self) -> None:
        """:raises ConfigurationError: If any section is invalid."""
        if not self.lister.type:
            raise ConfigurationError("Lister type must not be empty")
        self.scan.validate()

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> DedupConfig:
        """Construct from a plain dict (e.g. parsed TOML).

        :param data: Dict with optional ``lister`` and ``scan`` tables.
        :raises ConfigurationError: If a table has the wrong shape.
        """
        raw_lister = data.get("lister", {})
        raw_scan = data.get("scan", {})
        if not isinstance(raw_lister, dict) or not isinstance(raw_scan, dict):
            raise ConfigurationError("Expected 'lister' and 'scan' to be tables")

        raw_options = raw_lister.get("options", {})
        if not isinstance(raw_options, dict):
            raise ConfigurationError("Expected 'lister.options' to be a table")
        lister = ListerConfig(type=str(raw_lister.get("type", "local")), options=dict(raw_options))

        unknown = set(raw_scan) - {f.name for f in dataclasses.fields(ScanConfig)}
        if unknown:
            raise ConfigurationError(f"Unknown scan settings: {sorted(unknown)}")
        patterns = raw_scan.get("ignore_patterns", ())
        if isinstance(patterns, str) or not isinstance(patterns, (list, tuple)):
            raise ConfigurationError("Expected 'scan.ignore_patterns' to be a list of strings")
        try:
            scan = ScanConfig(
                root_path=str(raw_scan.get("root_path", "")),
                min_size=int(raw_scan.get("min_size", DEFAULT_MIN_SIZE)),  # type: ignore[call-overload]
                ignore_hidden=bool(raw_scan.get("ignore_hidden", False)),
                ignore_patterns=tuple(str(p) for p in patterns),
                progress_queue_size=int(raw_scan.get("progress_queue_size", DEFAULT_QUEUE_SIZE)),  # type: ignore[call-overload]
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid scan settings: {exc}") from exc

        config = cls(lister=lister, scan=scan)
        config.validate()
        return config

    @classmethod
    def from_toml(cls, path: PathLike) -> DedupConfig:
        """Load a TOML file with ``[lister]``, ``[lister.options]`` and ``[scan]`` tables.

        :raises ConfigurationError: If the file is unreadable or malformed.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as exc:
            raise ConfigurationError(f"Cannot read config file: {exc}", path=str(path)) from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Malformed config file: {exc}", path=str(path)) from exc
        return cls.from_dict(data)
