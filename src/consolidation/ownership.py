from __future__ import annotations

from typing import Iterable

from contracts.line_group import LineGroup


class OwnershipIndex:
    """
    Line -> names of the groups that directly own it.

    Owner sets are stored as a one-element tuple until a second owner arrives,
    and shrink back to a tuple when unregistering leaves a single owner.
    The index must mirror the working groups exactly: every line move in the
    engine is paired with register/unregister calls.
    """

    __slots__ = ("_owners",)

    def __init__(self) -> None:
        self._owners: dict[str, tuple[str] | set[str]] = {}

    @classmethod
    def from_groups(cls, groups: Iterable[LineGroup]) -> OwnershipIndex:
        index = cls()
        for group in groups:
            index.register_group(group)
        return index

    def register(self, line: str, group_name: str) -> None:
        owners = self._owners.get(line)
        if owners is None:
            self._owners[line] = (group_name,)
        elif isinstance(owners, set):
            owners.add(group_name)
        elif owners[0] != group_name:
            self._owners[line] = {owners[0], group_name}

    def register_group(self, group: LineGroup) -> None:
        for line in group.lines:
            self.register(line, group.name)

    def unregister(self, line: str, group_name: str) -> None:
        owners = self._owners.get(line)
        assert owners is not None, f"unregister of untracked line {line!r} (group {group_name})"
        if group_name not in owners:
            return
        if isinstance(owners, set):
            owners.discard(group_name)
            if len(owners) == 1:
                self._owners[line] = (next(iter(owners)),)
        else:
            del self._owners[line]

    def owners_of(self, line: str) -> frozenset[str]:
        owners = self._owners.get(line)
        return frozenset(owners) if owners else frozenset()

    def shared_lines(self) -> list[str]:
        return sorted(line for line, owners in self._owners.items() if len(owners) > 1)

    def pair_count(self) -> int:
        """Total number of direct (line, group) ownership pairs."""
        return sum(len(owners) for owners in self._owners.values())

    def __contains__(self, line: object) -> bool:
        return line in self._owners

    def __len__(self) -> int:
        return len(self._owners)
