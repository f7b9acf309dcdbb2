"""Type aliases used throughout remote_dedup."""

from __future__ import annotations

import os  # noqa: TC003
from typing import Callable, Union

PathLike = Union[str, "os.PathLike[str]"]  # noqa: UP007
ProgressSink = Callable[[int], None]
