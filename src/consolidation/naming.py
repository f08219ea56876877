from __future__ import annotations

import uuid
from typing import Iterable

from .config import ConsolidationConfig


class SyntheticNamer:
    """Hands out names for extracted groups, unique within one consolidation run."""

    def __init__(self, config: ConsolidationConfig, taken: Iterable[str] = ()) -> None:
        self._strategy = config.name_strategy
        self._prefix = config.name_prefix
        self._taken = set(taken)
        self._counter = 0

    def next_name(self) -> str:
        if self._strategy == "counter":
            while True:
                self._counter += 1
                name = f"{self._prefix}{self._counter}"
                if name not in self._taken:
                    break
        else:
            name = str(uuid.uuid4())
            assert name not in self._taken, f"uuid collision: {name}"
        self._taken.add(name)
        return name
