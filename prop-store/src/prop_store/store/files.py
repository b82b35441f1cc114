"""Unprivileged file primitives for `key=value` property files.

Reads never raise: a missing or unreadable file looks like an empty one to
the caller.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def file_exists(path: str | Path) -> bool:
    return Path(path).is_file()


def _iter_lines(path: str | Path) -> Iterable[str]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            yield line.rstrip("\n")


def read_file(path: str | Path) -> str:
    """Whole file with every line newline-terminated; "" on any failure."""

    try:
        return "".join(f"{line}\n" for line in _iter_lines(path))
    except (OSError, ValueError) as e:
        logger.debug("read_file(%s) failed: %s", path, e)
        return ""


def read_one_line(path: str | Path) -> Optional[str]:
    try:
        for line in _iter_lines(path):
            return line
    except (OSError, ValueError) as e:
        logger.warning("IO error reading %s: %s", path, e)
    return None


def write_one_line(path: str | Path, value: str) -> bool:
    """Overwrite `path` with `value` as-is (sysfs-style knobs)."""

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(value)
    except (OSError, ValueError) as e:
        logger.error("Error writing to %s: %s", path, e)
        return False
    return True


def write_lines_unchecked(path: str | Path, lines: Iterable[str]) -> None:
    """Overwrite `path`, terminating each line with a newline. Raises OSError."""

    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(f"{line}\n")
        f.flush()
        os.fsync(f.fileno())


def has_key(text: str, key: str) -> bool:
    prefix = f"{key}="
    return any(line.startswith(prefix) for line in text.splitlines())


def parse_properties(text: str) -> Dict[str, str]:
    props: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        props.setdefault(key.strip(), value.strip())
    return props


def find_property(text: str, key: str) -> Optional[str]:
    """Value of the first `key=` line, matching what an in-place edit would touch."""

    prefix = f"{key}="
    for line in text.splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :]
    return None
