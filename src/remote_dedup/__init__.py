"""Content-fingerprint duplicate finder for local and remote storage trees."""

from remote_dedup._analyzer import analyze_duplicates
from remote_dedup._config import DedupConfig, ListerConfig, ScanConfig
from remote_dedup._errors import (
    ConfigurationError,
    InvalidPath,
    ListerUnavailable,
    NotFound,
    PermissionDenied,
    RemoteDedupError,
    ScanFailed,
)
from remote_dedup._filters import DEFAULT_MIN_SIZE, FilterPolicy
from remote_dedup._lister import Lister
from remote_dedup._manifest import Manifest, ManifestBuilder
from remote_dedup._models import DuplicateReport, Duplication, FileRecord
from remote_dedup._progress import ProgressRelay
from remote_dedup._registry import create_lister, register_lister
from remote_dedup._render import format_bytes, render_report
from remote_dedup._scan import scan

__version__ = "0.1.0"

__all__ = [
    # Engine
    "scan",
    "analyze_duplicates",
    "Manifest",
    "ManifestBuilder",
    "FilterPolicy",
    "DEFAULT_MIN_SIZE",
    "ProgressRelay",
    # Models
    "FileRecord",
    "Duplication",
    "DuplicateReport",
    # Listers
    "Lister",
    "register_lister",
    "create_lister",
    # Config
    "ListerConfig",
    "ScanConfig",
    "DedupConfig",
    # Rendering
    "format_bytes",
    "render_report",
    # Errors
    "RemoteDedupError",
    "NotFound",
    "PermissionDenied",
    "InvalidPath",
    "ListerUnavailable",
    "ScanFailed",
    "ConfigurationError",
    # Version
    "__version__",
]
