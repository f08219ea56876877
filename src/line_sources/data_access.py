from __future__ import annotations

from pathlib import Path


class LineSourceError(Exception):
    pass


def resolve_under_data_root(*, data_root: Path, relpath: str) -> Path:
    """
    Resolve a relative path under an explicit data_root.

    Absolute paths and anything resolving outside data_root are refused.
    """

    if relpath.startswith(("/", "\\")) or (":" in relpath and "\\" in relpath):
        raise LineSourceError(f"Expected a relative path under data_root, got: {relpath!r}")

    root = data_root.expanduser().resolve()
    candidate = (root / relpath).resolve()

    if not candidate.is_relative_to(root):
        raise LineSourceError(f"Path traversal or external reference detected: relpath={relpath!r}")

    return candidate
