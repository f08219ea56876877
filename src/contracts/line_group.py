from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

_EMPTY_NESTED: Mapping[str, "LineGroup"] = MappingProxyType({})


class LineGroupBuilder:
    """
    Staged, copy-on-write mutation surface for `LineGroup`.

    Working collections are held as an empty tuple, a one-element tuple, or a
    general set/dict. The general form is allocated only when a second distinct
    element arrives and dropped again when removal brings the size back to 1.
    Observable behaviour is that of a plain mutable set/map.
    """

    __slots__ = ("_name", "_lines", "_nested")

    def __init__(self, name: str, *, lines: Iterable[str] = (), nested: Mapping[str, LineGroup] | None = None) -> None:
        self._name = str(name)
        self._lines: tuple[str, ...] | set[str] = ()
        self._nested: tuple[tuple[str, LineGroup], ...] | dict[str, LineGroup] = ()

        if isinstance(lines, (set, frozenset)) and len(lines) > 1:
            self._lines = set(lines)
        else:
            for line in lines:
                self.add_line(line)

        if nested:
            if len(nested) == 1:
                self._nested = tuple(nested.items())
            else:
                self._nested = dict(nested)

    def add_line(self, line: str) -> LineGroupBuilder:
        lines = self._lines
        if isinstance(lines, set):
            lines.add(line)
        elif not lines:
            self._lines = (line,)
        elif lines[0] != line:
            self._lines = {lines[0], line}
        return self

    def remove_line(self, line: str) -> LineGroupBuilder:
        lines = self._lines
        if isinstance(lines, set):
            lines.discard(line)
            if len(lines) == 1:
                self._lines = (next(iter(lines)),)
        elif lines and lines[0] == line:
            self._lines = ()
        return self

    def has_line(self, line: str) -> bool:
        return line in self._lines

    def lines_total(self) -> int:
        return len(self._lines)

    def nest_group(self, group: LineGroup) -> LineGroupBuilder:
        nested = self._nested
        if isinstance(nested, dict):
            nested[group.name] = group
        elif not nested or nested[0][0] == group.name:
            self._nested = ((group.name, group),)
        else:
            self._nested = {nested[0][0]: nested[0][1], group.name: group}
        return self

    def build(self) -> LineGroup:
        # Freeze by copy: the builder stays usable and never aliases the result.
        if self._nested:
            nested: Mapping[str, LineGroup] = MappingProxyType(dict(self._nested))
        else:
            nested = _EMPTY_NESTED
        return LineGroup(name=self._name, lines=frozenset(self._lines), nested=nested)


@dataclass(frozen=True, slots=True, eq=False)
class LineGroup:
    """
    Immutable named set of opaque lines plus named references to nested groups.

    A nested reference means "this group's content also includes every line of
    the nested group". Direct lines never repeat inside nested groups once the
    result of a consolidation run is returned.
    """

    name: str
    lines: frozenset[str] = frozenset()
    nested: Mapping[str, LineGroup] = field(default_factory=lambda: _EMPTY_NESTED)

    def __post_init__(self) -> None:
        # Direct construction is allowed; freeze whatever was passed in.
        if not isinstance(self.lines, frozenset):
            object.__setattr__(self, "lines", frozenset(self.lines))
        if not isinstance(self.nested, MappingProxyType):
            object.__setattr__(self, "nested", MappingProxyType(dict(self.nested)))

    @staticmethod
    def builder(seed: str | LineGroup) -> LineGroupBuilder:
        if isinstance(seed, LineGroup):
            return LineGroupBuilder(seed.name, lines=seed.lines, nested=seed.nested)
        return LineGroupBuilder(seed)

    @staticmethod
    def of(name: str, lines: Iterable[str] = (), nested: Iterable[LineGroup] = ()) -> LineGroup:
        b = LineGroupBuilder(name, lines=lines)
        for g in nested:
            b.nest_group(g)
        return b.build()

    def size(self) -> int:
        return len(self.lines)

    def has_nested_groups(self) -> bool:
        return bool(self.nested)

    def nested_group_names(self) -> list[str]:
        return sorted(self.nested)

    def get_nested_group(self, name: str) -> LineGroup | None:
        return self.nested.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "lines": sorted(self.lines),
            "nested": self.nested_group_names(),
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> LineGroup:
        # Nested names cannot be resolved from a single record; see ConsolidationResult.from_dict.
        return LineGroup.of(str(d["name"]), [str(x) for x in (d.get("lines") or [])])

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, LineGroup):
            return NotImplemented
        return self.name == other.name and self.lines == other.lines and dict(self.nested) == dict(other.nested)

    def __hash__(self) -> int:
        return hash((self.name, self.lines, frozenset(self.nested)))

    def __str__(self) -> str:
        parts = [f"[{self.name}:"]
        parts.extend("\n" + line for line in sorted(self.lines))
        if self.nested:
            parts.append("\ngroups=[" + ", ".join(self.nested_group_names()) + "]")
        parts.append("]")
        return "".join(parts)
