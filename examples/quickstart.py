"""Quickstart — scan a local tree and print its duplicates.

Demonstrates:
- Creating a lister from a ListerConfig
- Scanning with live progress
- Analyzing and rendering the duplicate report
"""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

from remote_dedup import ListerConfig, analyze_duplicates, create_lister, render_report, scan

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        (root / "photos").mkdir()
        (root / "backup").mkdir()
        (root / "photos" / "beach.jpg").write_bytes(b"\xff\xd8" * 4000)
        (root / "backup" / "beach.jpg").write_bytes(b"\xff\xd8" * 4000)
        (root / "notes.txt").write_bytes(b"too small to count")

        with create_lister(ListerConfig(type="local", options={"root": tmp})) as lister:
            manifest = scan(lister, progress=lambda count: print(f"seen {count} files"))

        print(f"Manifest: {manifest.file_count} files, {len(manifest)} distinct fingerprints")
        report = analyze_duplicates(manifest)
        render_report(report, sys.stdout)
