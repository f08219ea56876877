"""
Line sources: read named line collections into `LineGroup` inputs.

One group per file; the file name is the default group name. Content is
treated as opaque lines (no parsing).
"""

from .data_access import LineSourceError, resolve_under_data_root
from .reader import read_line_group, read_line_groups, read_line_groups_under

__all__ = [
    "LineSourceError",
    "resolve_under_data_root",
    "read_line_group",
    "read_line_groups",
    "read_line_groups_under",
]
