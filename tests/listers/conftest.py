"""Lister test fixtures: a moto S3 server and an in-process SFTP server."""

from __future__ import annotations

import socket
import uuid
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def moto_server() -> Iterator[str]:
    """Start a moto HTTP server for the test session.

    Server mode is used instead of ``mock_aws()`` because s3fs talks to S3
    through aiobotocore.
    """
    pytest.importorskip("moto", reason="moto not installed")
    from moto.moto_server.threaded_moto_server import ThreadedMotoServer

    port = _free_port()
    server = ThreadedMotoServer(port=port, verbose=False)
    server.start()
    yield f"http://127.0.0.1:{port}"
    server.stop()


@pytest.fixture
def s3_bucket(moto_server: str) -> Iterator[tuple[str, object]]:
    """Create an empty bucket; yields ``(bucket_name, boto3_client)``."""
    boto3 = pytest.importorskip("boto3", reason="boto3 not installed")
    client = boto3.client(
        "s3",
        endpoint_url=moto_server,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name="us-east-1",
    )
    bucket = f"dedup-{uuid.uuid4().hex[:8]}"
    client.create_bucket(Bucket=bucket)
    yield bucket, client


@pytest.fixture(scope="session")
def sftp_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("sftp_root")


@pytest.fixture(scope="session")
def sftp_server(sftp_root: Path) -> Iterator[int]:
    """Serve ``sftp_root`` over SFTP for the test session; yields the port."""
    pytest.importorskip("paramiko", reason="paramiko not installed")
    from tests.listers.sftp_server import SFTPTestServer

    with SFTPTestServer(str(sftp_root)) as server:
        yield server.port
