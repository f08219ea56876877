from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from contracts.line_group import LineGroup

from .data_access import LineSourceError, resolve_under_data_root

logger = logging.getLogger(__name__)


def read_line_group(path: Path, name: str | None = None) -> LineGroup:
    """
    Read one file as a group. Every line counts, empty ones included; only the
    line terminator is stripped, and repeated lines collapse into one.
    """

    if not path.is_file():
        raise LineSourceError(f"{path} does not exist")

    b = LineGroup.builder(name or path.name)
    read = 0
    try:
        with path.open("r", encoding="utf-8") as f:
            for raw in f:
                read += 1
                b.add_line(raw.rstrip("\r\n"))
    except (UnicodeDecodeError, OSError) as e:
        raise LineSourceError(f"{path} is not readable as UTF-8 text: {e}") from e

    logger.debug("read %s: %d lines, %d distinct", path, read, b.lines_total())
    return b.build()


def read_line_groups(paths: Iterable[Path]) -> list[LineGroup]:
    return [read_line_group(p) for p in paths]


def read_line_groups_under(*, data_root: Path, relpaths: Iterable[str]) -> list[LineGroup]:
    """Read groups from relpaths under data_root; the relpath becomes the group name."""

    groups: list[LineGroup] = []
    for relpath in relpaths:
        path = resolve_under_data_root(data_root=data_root, relpath=relpath)
        groups.append(read_line_group(path, name=relpath))
    return groups
