"""Lister registry — maps type names to lister classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_dedup._errors import ConfigurationError

if TYPE_CHECKING:
    from remote_dedup._config import ListerConfig
    from remote_dedup._lister import Lister

# Global lister factory registry: maps type strings to lister classes.
_LISTER_FACTORIES: dict[str, type[Lister]] = {}


def register_lister(type_name: str, cls: type[Lister]) -> None:
    """Register a lister class for a given type string.

    :param type_name: The type identifier (e.g. ``"local"``).
    :param cls: The lister class to instantiate.
    """
    _LISTER_FACTORIES[type_name] = cls


def _register_builtin_listers() -> None:
    """Register the built-in listers. Their native clients are imported lazily."""
    from remote_dedup.listers._local import LocalLister
    from remote_dedup.listers._s3 import S3Lister
    from remote_dedup.listers._sftp import SFTPLister

    _LISTER_FACTORIES.setdefault("local", LocalLister)
    _LISTER_FACTORIES.setdefault("s3", S3Lister)
    _LISTER_FACTORIES.setdefault("sftp", SFTPLister)


def registered_types() -> list[str]:
    """Sorted names of all registered lister types."""
    _register_builtin_listers()
    return sorted(_LISTER_FACTORIES)


def create_lister(config: ListerConfig) -> Lister:
    """Instantiate the lister described by ``config``.

    :raises ConfigurationError: If the type is unknown or the options are invalid.
    """
    _register_builtin_listers()
    if config.type not in _LISTER_FACTORIES:
        raise ConfigurationError(
            f"Unknown lister type '{config.type}'. Registered types: {sorted(_LISTER_FACTORIES)}"
        )
    factory = _LISTER_FACTORIES[config.type]
    try:
        return factory(**config.options)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid options for lister type {config.type!r}: {exc}. "
            f"Provided options: {sorted(config.options.keys())}"
        ) from exc
