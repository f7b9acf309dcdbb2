"""S3-compatible object storage lister using s3fs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from remote_dedup._errors import (
    ListerUnavailable,
    NotFound,
    PermissionDenied,
    RemoteDedupError,
)
from remote_dedup._lister import Lister
from remote_dedup._models import FileRecord
from remote_dedup._path import normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)


class S3Lister(Lister):
    """Lists objects in an S3 bucket, fingerprinting them by ETag.

    Objects uploaded in multiple parts carry a multipart ETag, so identical
    content uploaded differently is not grouped together.

    :param bucket: S3 bucket name (required, non-empty).
    :param endpoint_url: Custom endpoint URL (e.g. for MinIO).
    :param key: AWS access key ID.
    :param secret: AWS secret access key.
    :param region_name: AWS region name.
    :param client_options: Additional options passed to s3fs.
    """

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        key: str | None = None,
        secret: str | None = None,
        region_name: str | None = None,
        client_options: dict[str, Any] | None = None,
    ) -> None:
        if not bucket or not bucket.strip():
            raise ValueError("bucket must be a non-empty string")
        self._bucket = bucket
        self._endpoint_url = endpoint_url
        self._key = key
        self._secret = secret
        self._region_name = region_name
        self._client_options = client_options or {}
        self._fs_instance: Any = None

    def __repr__(self) -> str:
        return f"S3Lister(bucket={self._bucket!r})"

    @property
    def name(self) -> str:
        return "s3"

    # region: lazy filesystem

    @property
    def _fs(self) -> Any:
        if self._fs_instance is None:
            import s3fs  # type: ignore[import-untyped]

            opts: dict[str, Any] = dict(self._client_options)
            if self._endpoint_url is not None:
                opts["endpoint_url"] = self._endpoint_url
            if self._key is not None:
                opts["key"] = self._key
            if self._secret is not None:
                opts["secret"] = self._secret
            if self._region_name is not None:
                client_kwargs: dict[str, Any] = opts.setdefault("client_kwargs", {})
                client_kwargs["region_name"] = self._region_name
            opts.setdefault("anon", False)
            log.info("Opening S3 filesystem for bucket %s", self._bucket)
            self._fs_instance = s3fs.S3FileSystem(**opts)
        return self._fs_instance

    # endregion

    # region: path helpers

    def _s3_path(self, path: str) -> str:
        if path:
            return f"{self._bucket}/{path}"
        return self._bucket

    def _rel_path(self, s3_key: str) -> str:
        prefix = f"{self._bucket}/"
        if s3_key.startswith(prefix):
            s3_key = s3_key[len(prefix) :]
        return normalize_path(s3_key)

    # endregion

    # region: error mapping

    def _classify_error(self, exc: Exception, path: str) -> RemoteDedupError:
        """Classify a native s3fs/botocore exception into a remote_dedup error."""
        if isinstance(exc, FileNotFoundError):
            return NotFound(f"Not found: {path}", path=path, lister=self.name)
        if isinstance(exc, PermissionError):
            return PermissionDenied(f"Permission denied: {path}", path=path, lister=self.name)
        msg = str(exc).lower()
        if "404" in msg or "nosuchbucket" in msg or "not found" in msg:
            return NotFound(f"Not found: {path}", path=path, lister=self.name)
        if "403" in msg or "accessdenied" in msg or "access denied" in msg or "expiredtoken" in msg:
            return PermissionDenied(f"Permission denied: {path}", path=path, lister=self.name)
        if any(kw in msg for kw in ("endpoint", "connect", "timeout", "dns", "name or service", "slowdown")):
            return ListerUnavailable(str(exc), path=path, lister=self.name)
        return RemoteDedupError(str(exc), path=path, lister=self.name)

    # endregion

    @staticmethod
    def _etag(info: dict[str, Any]) -> str | None:
        etag = info.get("ETag", info.get("etag"))
        if not etag:
            return None
        return str(etag).strip('"')

    def _iter_objects(self, s3_path: str, path: str) -> Iterator[dict[str, Any]]:
        """Yield object infos one directory listing at a time."""
        walker = self._fs.walk(s3_path, detail=True, on_error="raise")
        while True:
            try:
                _dirpath, _dirs, files = next(walker)
            except StopIteration:
                return
            except Exception as exc:
                raise self._classify_error(exc, path) from None
            yield from files.values()

    def list_files(self, path: str = "") -> Iterator[FileRecord]:
        path = normalize_path(path)
        s3_path = self._s3_path(path)
        try:
            exists = self._fs.exists(s3_path)
        except Exception as exc:
            raise self._classify_error(exc, path) from None
        if not exists:
            raise NotFound(f"Folder not found: {path}", path=path, lister=self.name)

        for info in self._iter_objects(s3_path, path):
            if info.get("type") != "file":
                continue
            rel = self._rel_path(info["name"])
            etag = self._etag(info)
            if etag is None:
                log.debug("Skipping %s: no ETag reported", rel)
                continue
            size = info.get("size", info.get("Size", 0)) or 0
            yield FileRecord(path=rel, size=int(size), fingerprint=etag)

    def close(self) -> None:
        if self._fs_instance is not None:
            self._fs_instance.clear_instance_cache()
            self._fs_instance = None
