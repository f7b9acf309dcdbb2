"""Human-readable output: byte sizes, status line, and the duplicate report."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from remote_dedup._models import DuplicateReport

_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def format_bytes(size: int) -> str:
    """Format a byte count with SI units, e.g. ``"999 B"``, ``"1.0 kB"``, ``"83 MB"``.

    One decimal is shown below 10 units, none above.
    """
    if size < 1000:
        return f"{size} B"
    value = float(size)
    unit = _UNITS[0]
    for unit in _UNITS[1:]:
        value /= 1000
        if value < 1000:
            break
    if value < 10:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def plural(count: int, singular: str, plural_form: str = "") -> str:
    """``plural(1, "file")`` is ``"1 file"``; ``plural(2, "file")`` is ``"2 files"``."""
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural_form or singular + 's'}"


class StatusLine:
    """Progress consumer that keeps rewriting one line of ``stream``.

    :param stream: Usually ``sys.stderr``.
    :param template: Format string receiving the count.
    """

    def __init__(self, stream: TextIO, template: str = "Scanning: {} files") -> None:
        self._stream = stream
        self._template = template
        self.last_count: int | None = None

    def __call__(self, count: int) -> None:
        self.last_count = count
        self._stream.write(self._template.format(count) + "\r")
        self._stream.flush()

    def finish(self) -> None:
        """Move past the status line if anything was written."""
        if self.last_count is not None:
            self._stream.write("\n")
            self._stream.flush()


def render_report(report: DuplicateReport, out: TextIO) -> None:
    """Print ``report`` group by group in ranked order, then a blank line."""
    out.write(
        f"{plural(len(report.duplications), 'duplicate file group')} found "
        f"({plural(report.total_duplicate_count, 'file')}, {format_bytes(report.total_duplicate_size)}).\n\n"
    )
    for number, duplication in enumerate(report.duplications, start=1):
        out.write(
            f"Group {number} ({plural(duplication.duplicate_count, 'duplicate file')}, "
            f"{format_bytes(duplication.duplicate_size)})\n"
        )
        for record in duplication.files:
            out.write(f"{record.path}\n")
        out.write("\n")
    out.write("\n")
