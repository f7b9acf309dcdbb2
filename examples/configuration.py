"""Configuration — config-as-code, from_dict(), and lister configs.

Demonstrates different ways to create a DedupConfig, including
configuration for the S3 and SFTP listers.
"""

from __future__ import annotations

import tempfile

from remote_dedup import DedupConfig, ListerConfig, ScanConfig, analyze_duplicates, create_lister, scan

if __name__ == "__main__":
    # --- Option 1: Config-as-code with Python objects ---
    with tempfile.TemporaryDirectory() as tmp:
        config = DedupConfig(
            lister=ListerConfig(type="local", options={"root": tmp}),
            scan=ScanConfig(min_size=0, ignore_hidden=True, ignore_patterns=("*.tmp",)),
        )
        with create_lister(config.lister) as lister:
            manifest = scan(lister, config.scan.root_path)
        report = analyze_duplicates(manifest, config.scan.filter_policy())
        print(f"Empty tree: {report.total_duplicate_count} duplicates")

    # --- Option 2: from_dict() — e.g. loaded from TOML or JSON ---
    raw = {
        "lister": {"type": "local", "options": {"root": "~"}},
        "scan": {"root_path": "Downloads", "min_size": 4096, "ignore_patterns": [".DS_Store"]},
    }
    config = DedupConfig.from_dict(raw)
    print(f"\nfrom_dict(): {config.scan}")

    # --- Lister configs for S3 and SFTP ---
    # These are config-only examples. They show the structure but don't
    # connect to real services (no live credentials here).

    s3_config = DedupConfig(
        lister=ListerConfig(
            type="s3",
            options={
                "bucket": "my-bucket",
                "region_name": "eu-west-1",
                # "endpoint_url": "http://localhost:9000",  # For MinIO
            },
        ),
        scan=ScanConfig(root_path="backups/2024"),
    )
    print(f"\nS3 config: {s3_config.lister}")

    sftp_config = DedupConfig(
        lister=ListerConfig(
            type="sftp",
            options={
                "host": "files.example.com",
                "username": "deploy",
                "base_path": "/srv/share",
                "host_key_policy": "tofu",
            },
        ),
    )
    print(f"SFTP config: {sftp_config.lister}")

    # The same settings as a TOML file for `remote-dedup --config dedup.toml`:
    print(
        """
[lister]
type = "sftp"

[lister.options]
host = "files.example.com"
username = "deploy"
base_path = "/srv/share"

[scan]
min_size = 1000
ignore_hidden = true
"""
    )
