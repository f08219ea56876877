from __future__ import annotations

import logging
from typing import Sequence

from contracts.line_group import LineGroup

logger = logging.getLogger(__name__)


def fold_supersets(groups: Sequence[LineGroup]) -> tuple[list[LineGroup], int]:
    """
    Single sweep of whole-group containment folding.

    Groups are ordered by direct line count, largest first (stable: ties keep
    input order). For every pair (i, j) with i before j, if i's current lines
    contain all of j's lines, j's lines are removed from i and i nests j. The
    rebuilt i is what later j's are compared against. Identical groups fold
    too: the earlier one keeps an empty residual plus the reference.

    Returns the folded groups (in sorted order) and the number of folds made.
    """

    ordered = sorted(groups, key=lambda g: -g.size())
    folds = 0

    for i in range(len(ordered) - 1):
        big = ordered[i]
        for j in range(i + 1, len(ordered)):
            small = ordered[j]
            if not big.lines.issuperset(small.lines):
                continue
            b = LineGroup.builder(big)
            for line in small.lines:
                b.remove_line(line)
            b.nest_group(small)
            big = b.build()
            ordered[i] = big
            folds += 1
            logger.debug("folded %s into %s (%d residual lines)", small.name, big.name, big.size())

    return ordered, folds
