"""Path normalization for file records."""

from __future__ import annotations

import unicodedata

from remote_dedup._errors import InvalidPath


def normalize_path(raw: str) -> str:
    """Normalize a lister-relative path.

    Unicode combining sequences are composed (NFC), backslashes become
    forward slashes, and empty or ``.`` segments are dropped.

    :param raw: The raw path as reported by the storage service.
    :returns: The normalized path. Empty string for the root.
    :raises InvalidPath: If the path contains a null byte or a ``..`` segment.
    """
    if "\0" in raw:
        raise InvalidPath("Path contains null byte", path=raw)
    composed = unicodedata.normalize("NFC", raw).replace("\\", "/")
    parts: list[str] = []
    for segment in composed.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise InvalidPath("Path contains '..' segment", path=raw)
        parts.append(segment)
    return "/".join(parts)


def join_path(parent: str, name: str) -> str:
    """Join two normalized paths, treating an empty parent as the root."""
    if not parent:
        return name
    if not name:
        return parent
    return f"{parent}/{name}"


def path_segments(path: str) -> tuple[str, ...]:
    """Components of a normalized path. Empty tuple for the root."""
    if not path:
        return ()
    return tuple(path.split("/"))
