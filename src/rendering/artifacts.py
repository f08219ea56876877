from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.consolidation import ConsolidationResult
from contracts.line_group import LineGroup

ARTIFACT_SCHEMA = "line_groups_result_v1"


def outside_groups(result: ConsolidationResult) -> list[LineGroup]:
    """Groups reachable through nesting that the result itself does not list, by name."""

    found: dict[str, LineGroup] = {}
    stack = [n for g in result.groups.values() for n in g.nested.values()]
    while stack:
        g = stack.pop()
        if g.name in result.groups or g.name in found:
            continue
        found[g.name] = g
        stack.extend(g.nested.values())
    return [found[name] for name in sorted(found)]


def serialize_consolidation_result(result: ConsolidationResult) -> str:
    """
    The result as a self-contained JSON document: every nested name resolves
    either to a listed group or to an entry of `outside_groups`, so
    `ConsolidationResult.from_dict` can load it back.
    """

    payload: dict[str, Any] = result.to_dict()
    payload["schema"] = ARTIFACT_SCHEMA
    outside = outside_groups(result)
    if outside:
        payload["outside_groups"] = [g.to_dict() for g in outside]
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), indent=2) + "\n"


def write_consolidation_artifact(*, result: ConsolidationResult, out_file: Path) -> None:
    # Readers never see a half-written artifact: write beside it, then swap.
    out_file.parent.mkdir(parents=True, exist_ok=True)
    tmp = out_file.with_name(out_file.name + ".tmp")
    tmp.write_text(serialize_consolidation_result(result), encoding="utf-8")
    tmp.replace(out_file)
