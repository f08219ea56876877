"""
Line-group consolidation.

Factors lines that recur across several named groups into shared groups the
originals nest instead of repeating:
- whole-group containment folding (one sweep, largest first)
- inverted line -> owning groups index
- first-found extraction fixpoint, rebasing every affected group

Pure in-memory transformation: no I/O, no threads, no randomness beyond
synthetic group names (uuid4 unless the counter strategy is configured).
"""

from .config import ConsolidationConfig
from .engine import consolidate, consolidate_result
from .errors import (
    AmbiguousIdenticalGroups,
    ConsolidationError,
    ConsolidationInvariantError,
    DuplicateGroupName,
    PassLimitExceeded,
)
from .folding import fold_supersets
from .invariants import effective_lines, verify
from .ownership import OwnershipIndex

__all__ = [
    "ConsolidationConfig",
    "consolidate",
    "consolidate_result",
    "fold_supersets",
    "OwnershipIndex",
    "effective_lines",
    "verify",
    "ConsolidationError",
    "DuplicateGroupName",
    "AmbiguousIdenticalGroups",
    "PassLimitExceeded",
    "ConsolidationInvariantError",
]
