"""Storing uploaded photos and removing them once a receipt is done."""

from __future__ import annotations

import itertools
import logging
import re
import time
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

_sequence = itertools.count()
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def unique_prefix() -> str:
    """Time-based prefix that stays unique across calls in the same process."""
    return f"{time.time_ns()}-{next(_sequence)}"


def safe_name(filename: str) -> str:
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "foto"


def save_upload(upload_dir: str | Path, filename: str, data: bytes) -> Path:
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{unique_prefix()}-{safe_name(filename)}"
    path.write_bytes(data)
    logger.debug("Stored upload %r as %s (%d bytes)", filename, path.name, len(data))
    return path


def remove_files(paths: Iterable[str | Path]) -> int:
    """Delete each file that still exists. Failures are logged, never raised."""
    removed = 0
    for raw in paths:
        path = Path(raw)
        try:
            path.unlink()
            removed += 1
        except FileNotFoundError:
            continue
        except OSError:
            logger.exception("Failed to remove transient file %s", path)
    return removed
