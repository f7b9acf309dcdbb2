"""Error handling — catching NotFound, InvalidPath and ScanFailed.

Demonstrates the normalized error hierarchy and how to handle errors
programmatically using structured attributes.
"""

from __future__ import annotations

import tempfile

from remote_dedup import (
    ConfigurationError,
    InvalidPath,
    ListerConfig,
    NotFound,
    RemoteDedupError,
    ScanFailed,
    create_lister,
    scan,
)

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        lister = create_lister(ListerConfig(type="local", options={"root": tmp}))

        # --- Listing errors surface directly from list_files() ---
        try:
            list(lister.list_files("missing"))
        except NotFound as exc:
            print(f"NotFound: {exc}")
            print(f"  path={exc.path}, lister={exc.lister}")

        try:
            list(lister.list_files("../outside"))
        except InvalidPath as exc:
            print(f"InvalidPath: {exc}")

        # --- scan() wraps them in ScanFailed, keeping the cause ---
        try:
            scan(lister, "missing")
        except ScanFailed as exc:
            print(f"ScanFailed: {exc}")
            print(f"  caused by {type(exc.__cause__).__name__}")

    # --- Bad configuration ---
    try:
        create_lister(ListerConfig(type="ftp"))
    except ConfigurationError as exc:
        print(f"ConfigurationError: {exc}")

    # --- Catch-all ---
    try:
        create_lister(ListerConfig(type="s3", options={"bucket": ""}))
    except RemoteDedupError as exc:
        print(f"RemoteDedupError ({type(exc).__name__}): {exc}")
