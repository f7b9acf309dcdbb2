"""Read-only in-process SFTP server for lister tests.

Serves a local directory over a real SSH transport in a background thread.
Any username and password are accepted.
"""

from __future__ import annotations

import contextlib
import os
import socket
import threading
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import paramiko
from paramiko import (
    AUTH_SUCCESSFUL,
    OPEN_SUCCEEDED,
    RSAKey,
    ServerInterface,
    SFTPAttributes,
    SFTPHandle,
    SFTPServer,
    SFTPServerInterface,
    Transport,
)

if TYPE_CHECKING:
    from types import TracebackType


class _AcceptAll(ServerInterface):
    def check_auth_password(self, username: str, password: str) -> int:
        return AUTH_SUCCESSFUL

    def check_channel_request(self, kind: str, chanid: int) -> int:
        return OPEN_SUCCEEDED


class _ReadHandle(SFTPHandle):
    def stat(self) -> SFTPAttributes | int:
        try:
            return SFTPAttributes.from_stat(os.fstat(self.readfile.fileno()))
        except OSError as exc:
            return SFTPServer.convert_errno(exc.errno)


class _ReadOnlySFTP(SFTPServerInterface):
    """Maps listing and read operations onto ``ROOT``; refuses writes."""

    ROOT: str = ""

    def _local(self, path: str) -> str:
        relative = str(PurePosixPath("/", path)).lstrip("/")
        return str(Path(self.ROOT) / relative)

    def list_folder(self, path: str) -> list[SFTPAttributes] | int:
        local = self._local(path)
        try:
            entries = []
            for name in os.listdir(local):
                attr = SFTPAttributes.from_stat(os.stat(os.path.join(local, name)))
                attr.filename = name
                entries.append(attr)
            return entries
        except OSError as exc:
            return SFTPServer.convert_errno(exc.errno)

    def stat(self, path: str) -> SFTPAttributes | int:
        try:
            return SFTPAttributes.from_stat(os.stat(self._local(path)))
        except OSError as exc:
            return SFTPServer.convert_errno(exc.errno)

    lstat = stat

    def open(self, path: str, flags: int, attr: SFTPAttributes) -> SFTPHandle | int:
        if flags & (os.O_WRONLY | os.O_RDWR | os.O_CREAT):
            return paramiko.SFTP_PERMISSION_DENIED
        try:
            fobj = open(self._local(path), "rb")  # noqa: SIM115 -- closed by the handle
        except OSError as exc:
            return SFTPServer.convert_errno(exc.errno)
        handle = _ReadHandle(flags)
        handle.filename = path
        handle.readfile = fobj
        return handle


class SFTPTestServer:
    """Serves ``root`` on ``127.0.0.1`` until :meth:`stop` is called.

    :param root: Local directory exposed as ``/``.
    """

    def __init__(self, root: str) -> None:
        self.root = root
        self.host_key = RSAKey.generate(2048)
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind(("127.0.0.1", 0))
        self._socket.listen(5)
        self.port: int = self._socket.getsockname()[1]
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, name="sftp-test-server", daemon=True)

    def start(self) -> SFTPTestServer:
        _ReadOnlySFTP.ROOT = self.root
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        with contextlib.suppress(OSError):
            self._socket.close()
        self._thread.join(timeout=5)

    def _serve(self) -> None:
        self._socket.settimeout(0.5)
        while not self._stop.is_set():
            try:
                conn, _addr = self._socket.accept()
            except TimeoutError:
                continue
            except OSError:
                break
            transport = Transport(conn)
            transport.add_server_key(self.host_key)
            transport.set_subsystem_handler("sftp", SFTPServer, _ReadOnlySFTP)
            try:
                transport.start_server(server=_AcceptAll())
            except (paramiko.SSHException, EOFError, OSError):
                transport.close()

    def __enter__(self) -> SFTPTestServer:
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()
