"""
Data contracts shared by the consolidation core and its collaborators.

`LineGroup` is immutable; every change goes through a `LineGroupBuilder`
seeded from the old group. Readers, the engine and renderers consume these
objects (not ad-hoc dicts).
"""

from .consolidation import ConsolidationIssue, ConsolidationResult
from .line_group import LineGroup, LineGroupBuilder

__all__ = [
    "LineGroup",
    "LineGroupBuilder",
    "ConsolidationIssue",
    "ConsolidationResult",
]
