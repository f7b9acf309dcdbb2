"""SFTP lister using pure paramiko."""

from __future__ import annotations

import contextlib
import errno
import hashlib
import logging
import os
import posixpath
import stat
from enum import Enum
from typing import TYPE_CHECKING, Any

from remote_dedup._errors import (
    ListerUnavailable,
    NotFound,
    PermissionDenied,
    RemoteDedupError,
)
from remote_dedup._lister import Lister
from remote_dedup._models import FileRecord
from remote_dedup._path import join_path, normalize_path

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)

# RFC 4253 compliant chunk size for SFTP data transfer
_CHUNK_SIZE = 32768


class HostKeyPolicy(Enum):
    """Controls how unknown remote host keys are handled.

    :cvar STRICT: Reject unknown hosts (production default).
    :cvar TRUST_ON_FIRST_USE: Accept and remember unknown hosts for this session.
    :cvar AUTO_ADD: Accept any key (dev/testing ONLY).
    """

    STRICT = "strict"
    TRUST_ON_FIRST_USE = "tofu"
    AUTO_ADD = "auto"


class SFTPLister(Lister):
    """Lists an SFTP tree, fingerprinting files by streaming their content through MD5.

    The connection is opened lazily on first use and retried with exponential
    backoff.

    :param host: SFTP server hostname (required, non-empty).
    :param port: SSH port (default: 22).
    :param username: SSH username.
    :param password: SSH password.
    :param pkey: paramiko.PKey instance for key-based auth.
    :param base_path: Root path on the remote server (default: ``/``).
    :param host_key_policy: Host key verification policy, or its string value.
    :param host_keys_path: Path to known_hosts file (default: ``~/.ssh/known_hosts``).
    :param timeout: SSH connection timeout in seconds.
    :param connect_kwargs: Extra kwargs passed to ``SSHClient.connect()``.
    """

    def __init__(
        self,
        host: str,
        *,
        port: int = 22,
        username: str | None = None,
        password: str | None = None,
        pkey: Any = None,
        base_path: str = "/",
        host_key_policy: HostKeyPolicy | str = HostKeyPolicy.STRICT,
        host_keys_path: str | None = None,
        timeout: int = 10,
        connect_kwargs: dict[str, Any] | None = None,
    ) -> None:
        if not host or not host.strip():
            raise ValueError("host must be a non-empty string")
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._pkey = pkey
        self._base_path = base_path.rstrip("/") or "/"
        self._host_key_policy = HostKeyPolicy(host_key_policy)
        self._host_keys_path = host_keys_path
        self._timeout = timeout
        self._connect_kwargs = connect_kwargs or {}

        self._ssh_client: Any = None
        self._sftp_client: Any = None

    def __repr__(self) -> str:
        return f"SFTPLister(host={self._host!r}, port={self._port}, base_path={self._base_path!r})"

    @property
    def name(self) -> str:
        return "sftp"

    # region: lazy connection

    @property
    def _sftp(self) -> Any:
        """Lazy SFTP client with automatic reconnection on staleness."""
        if not self._is_connected():
            self._connect()
        return self._sftp_client

    def _connect(self) -> None:
        """Establish SSH + SFTP connection with tenacity retry."""
        import paramiko
        from tenacity import (
            before_sleep_log,
            retry,
            retry_if_exception_type,
            retry_if_not_exception_type,
            stop_after_attempt,
            wait_exponential,
        )

        self._close_clients()
        ssh = self._create_ssh_client()

        @retry(
            retry=(
                retry_if_exception_type((paramiko.SSHException, OSError, EOFError))
                & retry_if_not_exception_type(paramiko.AuthenticationException)
            ),
            stop=stop_after_attempt(3),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            before_sleep=before_sleep_log(log, logging.WARNING),  # type: ignore[arg-type,unused-ignore]
            reraise=True,
        )
        def _do_connect() -> None:
            log.info("Connecting to %s:%d as %s", self._host, self._port, self._username)
            ssh.connect(
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                pkey=self._pkey,
                timeout=self._timeout,
                banner_timeout=self._timeout,
                auth_timeout=self._timeout,
                **self._connect_kwargs,
            )

        try:
            _do_connect()
        except paramiko.AuthenticationException as exc:
            raise PermissionDenied(f"Authentication failed: {exc}", lister=self.name) from None
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise ListerUnavailable(f"Cannot connect to {self._host}:{self._port}: {exc}", lister=self.name) from None
        self._ssh_client = ssh
        self._sftp_client = ssh.open_sftp()
        log.info("SFTP connection established.")

    def _create_ssh_client(self) -> Any:
        """Create and configure an SSHClient with host key policy."""
        import paramiko

        ssh = paramiko.SSHClient()
        if self._host_key_policy is not HostKeyPolicy.AUTO_ADD:
            keys_path = self._host_keys_path or os.path.expanduser("~/.ssh/known_hosts")
            if os.path.isfile(keys_path):
                ssh.load_host_keys(keys_path)

        if self._host_key_policy is HostKeyPolicy.STRICT:
            ssh.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            if self._host_key_policy is HostKeyPolicy.AUTO_ADD:
                log.warning("AUTO_ADD host key policy -- NOT safe for production.")
            ssh.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        return ssh

    def _is_connected(self) -> bool:
        if self._sftp_client is None or self._ssh_client is None:
            return False
        try:
            self._sftp_client.stat(".")
            return True
        except Exception:  # pragma: no cover -- requires transport failure
            return False

    def _close_clients(self) -> None:
        if self._sftp_client is not None:
            with contextlib.suppress(Exception):
                self._sftp_client.close()
            self._sftp_client = None
        if self._ssh_client is not None:
            with contextlib.suppress(Exception):
                self._ssh_client.close()
            self._ssh_client = None

    # endregion

    # region: helpers

    def _sftp_path(self, path: str) -> str:
        return posixpath.join(self._base_path, path) if path else self._base_path

    def _map_error(self, exc: Exception, path: str) -> RemoteDedupError:
        """Map paramiko/OS exceptions to remote_dedup errors."""
        import paramiko

        if isinstance(exc, RemoteDedupError):
            return exc
        code = getattr(exc, "errno", None)
        if isinstance(exc, FileNotFoundError) or code == errno.ENOENT:
            return NotFound(f"Not found: {path}", path=path, lister=self.name)
        if isinstance(exc, PermissionError) or code == errno.EACCES:
            return PermissionDenied(f"Permission denied: {path}", path=path, lister=self.name)
        if isinstance(exc, (paramiko.SSHException, EOFError)):
            return ListerUnavailable(str(exc), path=path, lister=self.name)
        return RemoteDedupError(str(exc), path=path, lister=self.name)

    def _fingerprint(self, sftp_path: str, size: int) -> str:
        digest = hashlib.md5(usedforsecurity=False)
        with self._sftp.open(sftp_path, "rb") as f:
            f.prefetch(size)
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()

    # endregion

    def _walk(self, remote: str, path: str) -> Iterator[FileRecord]:
        # ``remote`` keeps the server's own names for I/O; ``path`` is the normalized record path.
        try:
            entries = self._sftp.listdir_attr(remote)
        except Exception as exc:
            raise self._map_error(exc, path) from None
        for attr in entries:
            remote_child = posixpath.join(remote, attr.filename)
            child = join_path(path, normalize_path(attr.filename))
            if stat.S_ISDIR(attr.st_mode):
                yield from self._walk(remote_child, child)
            elif stat.S_ISREG(attr.st_mode):
                size = int(attr.st_size or 0)
                try:
                    fingerprint = self._fingerprint(remote_child, size)
                except Exception as exc:
                    raise self._map_error(exc, child) from None
                yield FileRecord(path=child, size=size, fingerprint=fingerprint)

    def list_files(self, path: str = "") -> Iterator[FileRecord]:
        record_path = normalize_path(path)
        remote = "/".join(s for s in path.replace("\\", "/").split("/") if s not in ("", "."))
        yield from self._walk(self._sftp_path(remote), record_path)

    def close(self) -> None:
        self._close_clients()
