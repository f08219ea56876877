from __future__ import annotations

from dataclasses import dataclass
from typing import Any

NAME_STRATEGIES = ("uuid", "counter")


@dataclass(frozen=True, slots=True)
class ConsolidationConfig:
    """
    Explicit consolidation parameters. Nothing is read from the environment.

    The default naming strategy is random (uuid4); pick "counter" for
    reproducible synthetic group names.
    """

    fold_supersets: bool = True
    name_strategy: str = "uuid"
    name_prefix: str = "shared-"  # counter strategy only: f"{prefix}{n}"
    relink_nested: bool = True
    max_passes: int | None = None

    def validate(self) -> None:
        if self.name_strategy not in NAME_STRATEGIES:
            raise ValueError(f"name_strategy must be one of {NAME_STRATEGIES}, got {self.name_strategy!r}")
        if self.name_strategy == "counter" and not self.name_prefix:
            raise ValueError("name_prefix must be non-empty for the counter strategy")
        if self.max_passes is not None and self.max_passes < 1:
            raise ValueError("max_passes must be >= 1 when set")

    def __post_init__(self) -> None:
        self.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "fold_supersets": self.fold_supersets,
            "name_strategy": self.name_strategy,
            "name_prefix": self.name_prefix,
            "relink_nested": self.relink_nested,
            "max_passes": self.max_passes,
        }
