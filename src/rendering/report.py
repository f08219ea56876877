from __future__ import annotations

from typing import Callable, Mapping

from contracts.line_group import LineGroup


def render_group(group: LineGroup, line_formatter: Callable[[str], str] | None = None) -> list[str]:
    out = [f"GROUP {group.name}"]
    if group.has_nested_groups():
        out.append(" Includes: " + ", ".join(group.nested_group_names()))
    if group.size() > 0:
        out.append(" Lines:")
        for line in sorted(group.lines):
            out.append("  " + (line_formatter(line) if line_formatter else line))
    return out


def render_report(groups: Mapping[str, LineGroup], line_formatter: Callable[[str], str] | None = None) -> str:
    """
    Plain-text listing of consolidated groups, in mapping order.

    Direct lines are sorted by raw content before formatting; nested group
    names are sorted.
    """

    blocks = ["\n".join(render_group(g, line_formatter)) for g in groups.values()]
    return "\n\n".join(blocks) + ("\n" if blocks else "")
