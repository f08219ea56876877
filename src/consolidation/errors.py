from __future__ import annotations

from typing import Any


class ConsolidationError(Exception):
    """Base class for failures that abort a consolidation run (no partial result)."""

    code = "CONSOLIDATION_FAILED"

    def detail(self) -> dict[str, Any] | None:
        return None


class DuplicateGroupName(ConsolidationError):
    code = "DUPLICATE_GROUP_NAME"

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate group name {name}")
        self.name = name

    def detail(self) -> dict[str, Any] | None:
        return {"name": self.name}


class AmbiguousIdenticalGroups(ConsolidationError):
    code = "AMBIGUOUS_IDENTICAL_GROUPS"

    def __init__(self, first: str, second: str) -> None:
        super().__init__(f"Groups {first} and {second} appear to be identical")
        self.first = first
        self.second = second

    def detail(self) -> dict[str, Any] | None:
        return {"groups": [self.first, self.second]}


class PassLimitExceeded(ConsolidationError):
    code = "PASS_LIMIT_EXCEEDED"

    def __init__(self, max_passes: int) -> None:
        super().__init__(f"Extraction did not reach a fixpoint within {max_passes} passes")
        self.max_passes = max_passes

    def detail(self) -> dict[str, Any] | None:
        return {"max_passes": self.max_passes}


class ConsolidationInvariantError(ConsolidationError):
    code = "CONSOLIDATION_INVARIANT_VIOLATED"

    def __init__(self, violations: list[str]) -> None:
        super().__init__("Consolidated groups violate invariants: " + "; ".join(violations))
        self.violations = list(violations)

    def detail(self) -> dict[str, Any] | None:
        return {"violations": list(self.violations)}
