"""Lister implementations."""

from remote_dedup.listers._local import LocalLister
from remote_dedup.listers._s3 import S3Lister
from remote_dedup.listers._sftp import HostKeyPolicy, SFTPLister

__all__ = ["HostKeyPolicy", "LocalLister", "S3Lister", "SFTPLister"]
