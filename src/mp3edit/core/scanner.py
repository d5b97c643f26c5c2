"""Input file selection."""

from collections.abc import Sequence
from pathlib import Path

DEFAULT_PATTERN = "*.mp3"


class NoInputError(Exception):
    """No files were given and the default pattern matched nothing."""


def expand_inputs(files: Sequence[Path], pattern: str = DEFAULT_PATTERN, root: Path | None = None) -> list[Path]:
    """Return the files to process, in order.

    Explicit paths are returned untouched (missing ones fail later, when they
    are opened). Without explicit paths, every file in ``root`` (default: the
    current directory) matching ``pattern`` is returned, sorted.
    """
    if files:
        return [Path(f) for f in files]

    root = Path(".") if root is None else Path(root)
    matches = sorted(path for path in root.glob(pattern) if path.is_file())
    if not matches:
        raise NoInputError(f"No files match {pattern}")
    return matches
