"""Command line entry point: ``remote-dedup``."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import textwrap
from typing import TYPE_CHECKING

from remote_dedup._analyzer import analyze_duplicates
from remote_dedup._config import DedupConfig, ListerConfig
from remote_dedup._errors import ConfigurationError, RemoteDedupError
from remote_dedup._registry import create_lister, registered_types
from remote_dedup._render import StatusLine, render_report
from remote_dedup._scan import scan

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

log = logging.getLogger(__name__)


def _parse_option(raw: str) -> tuple[str, object]:
    """Split ``KEY=VALUE``; integers and ``true``/``false`` are converted."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    if value.lower() in ("true", "false"):
        return key, value.lower() == "true"
    if value.isdigit():
        return key, int(value)
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remote-dedup",
        description="List a storage tree, group files by content fingerprint and report duplicates.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Examples:
              remote-dedup --option root=~/Pictures
              remote-dedup --lister s3 --option bucket=backups photos/2023
              remote-dedup --config dedup.toml --verbose
            """
        ).strip(),
    )
    parser.add_argument("root_path", nargs="?", metavar="ROOT", help="Subtree to scan, relative to the lister root.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show scan progress and debug logging.")
    parser.add_argument("--config", metavar="FILE", help="TOML file with [lister], [lister.options] and [scan].")
    parser.add_argument("--lister", metavar="TYPE", help=f"Lister type ({', '.join(registered_types())}).")
    parser.add_argument(
        "-o",
        "--option",
        dest="options",
        action="append",
        type=_parse_option,
        default=[],
        metavar="KEY=VALUE",
        help="Lister option, may be repeated (e.g. root=/data, bucket=name, host=example.com).",
    )
    parser.add_argument("--min-size", type=int, metavar="BYTES", help="Ignore files smaller than this (default 1000).")
    parser.add_argument("--ignore-hidden", action="store_true", default=None, help="Ignore dotfiles and dot-dirs.")
    parser.add_argument(
        "--ignore",
        dest="ignore_patterns",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern of files to ignore, may be repeated.",
    )
    return parser


def load_config(args: argparse.Namespace) -> DedupConfig:
    """Merge the optional config file with command line overrides.

    :raises ConfigurationError: If the result is invalid.
    """
    config = DedupConfig.from_toml(args.config) if args.config else DedupConfig()

    lister_type = args.lister or config.lister.type
    options = dict(config.lister.options) if lister_type == config.lister.type else {}
    options.update(dict(args.options))
    if lister_type == "local":
        options.setdefault("root", ".")
    lister = ListerConfig(type=lister_type, options=options)

    overrides: dict[str, object] = {}
    if args.root_path is not None:
        overrides["root_path"] = args.root_path
    if args.min_size is not None:
        overrides["min_size"] = args.min_size
    if args.ignore_hidden is not None:
        overrides["ignore_hidden"] = args.ignore_hidden
    if args.ignore_patterns:
        overrides["ignore_patterns"] = (*config.scan.ignore_patterns, *args.ignore_patterns)
    scan_config = dataclasses.replace(config.scan, **overrides)  # type: ignore[arg-type]

    merged = DedupConfig(lister=lister, scan=scan_config)
    merged.validate()
    return merged


def run(
    config: DedupConfig,
    *,
    verbose: bool = False,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Scan, analyze and print. Returns the process exit code."""
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        lister = create_lister(config.lister)
    except ConfigurationError as exc:
        err.write(f"error: {exc}\n")
        return 1

    status = StatusLine(err) if verbose else None
    out.write(f"Scanning {config.lister.type} for duplicates\n\n")
    out.flush()
    try:
        with lister:
            manifest = scan(
                lister,
                config.scan.root_path,
                progress=status,
                queue_size=config.scan.progress_queue_size,
            )
    except RemoteDedupError as exc:
        if status is not None:
            status.finish()
        log.debug("Scan aborted", exc_info=True)
        err.write(f"error: {exc}\n")
        return 1
    if status is not None:
        status.finish()
    out.write("Finished scanning.\n\n")

    report = analyze_duplicates(manifest, config.scan.filter_policy())
    render_report(report, out)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(args)
    except ConfigurationError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return run(config, verbose=args.verbose)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
