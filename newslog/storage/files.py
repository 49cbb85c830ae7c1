"""Atomic file helpers shared by the cache and metrics stores."""

import os
import tempfile
from pathlib import Path

TEMP_SUFFIX = ".part"


def atomic_write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a temp file and ``os.replace``.

    Readers see either the old file or the complete new one. Raises
    ``OSError`` on failure, after removing the temp file.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=TEMP_SUFFIX,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except OSError:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
