from __future__ import annotations

from typing import Iterable, Mapping

from contracts.line_group import LineGroup

from .errors import ConsolidationInvariantError


def effective_lines(group: LineGroup) -> frozenset[str]:
    """Direct lines plus the lines of every group reachable through nesting."""

    out: set[str] = set()
    stack = [group]
    seen: set[int] = set()
    while stack:
        g = stack.pop()
        if id(g) in seen:
            continue
        seen.add(id(g))
        out.update(g.lines)
        stack.extend(g.nested.values())
    return frozenset(out)


def disjointness_violations(result: Mapping[str, LineGroup]) -> list[tuple[str, str, str]]:
    """(group, nested group, line) for every direct line repeated below its group."""

    violations: list[tuple[str, str, str]] = []
    for name in sorted(result):
        group = result[name]
        if not group.lines:
            continue
        stack = list(group.nested.values())
        seen: set[str] = set()
        while stack:
            nested = stack.pop()
            if nested.name in seen:
                continue
            seen.add(nested.name)
            for line in sorted(group.lines & nested.lines):
                violations.append((name, nested.name, line))
            stack.extend(nested.nested.values())
    return violations


def content_mismatches(inputs: Iterable[LineGroup], result: Mapping[str, LineGroup]) -> list[str]:
    """Names of input groups whose effective content in `result` differs from the input lines."""

    out: list[str] = []
    for g in inputs:
        r = result.get(g.name)
        if r is None or effective_lines(r) != effective_lines(g):
            out.append(g.name)
    return out


def flatten(result: Mapping[str, LineGroup]) -> list[LineGroup]:
    """Each result group as a fresh unnested input: same name, direct lines only."""

    return [LineGroup.of(name, g.lines) for name, g in result.items()]


def verify(inputs: Iterable[LineGroup], result: Mapping[str, LineGroup]) -> None:
    violations: list[str] = []
    for group, nested, line in disjointness_violations(result):
        violations.append(f"line {line!r} of {group} repeated in nested group {nested}")
    for name in content_mismatches(inputs, result):
        violations.append(f"content of {name} not preserved")
    for name, g in result.items():
        if g.name != name:
            violations.append(f"group {g.name} registered under name {name}")
    if violations:
        raise ConsolidationInvariantError(violations)
