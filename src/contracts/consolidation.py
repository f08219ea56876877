from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .line_group import LineGroup


@dataclass(frozen=True, slots=True)
class ConsolidationIssue:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class ConsolidationResult:
    ok: bool
    groups: dict[str, LineGroup]  # working order: folded inputs first, synthesized groups appended
    errors: list[ConsolidationIssue] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)  # config echo + run stats

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "errors": [asdict(e) for e in self.errors],
            "meta": dict(self.meta),
            "groups": [g.to_dict() for _, g in sorted(self.groups.items())],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ConsolidationResult":
        records = {str(r["name"]): r for r in (d.get("groups") or [])}
        # Nested targets that are not result groups themselves.
        defined = {str(r["name"]): r for r in (d.get("outside_groups") or [])}
        defined.update(records)
        built: dict[str, LineGroup] = {}
        visiting: set[str] = set()

        def _build(name: str) -> LineGroup:
            if name in built:
                return built[name]
            if name not in defined:
                raise ValueError(f"Nested group {name!r} is not defined in the result")
            if name in visiting:
                raise ValueError(f"Nesting cycle through group {name!r}")
            visiting.add(name)
            r = defined[name]
            b = LineGroup.builder(name)
            for line in r.get("lines") or []:
                b.add_line(str(line))
            for nested_name in r.get("nested") or []:
                b.nest_group(_build(str(nested_name)))
            visiting.discard(name)
            built[name] = b.build()
            return built[name]

        groups = {name: _build(name) for name in records}
        return ConsolidationResult(
            ok=bool(d.get("ok", False)),
            groups=groups,
            errors=[
                ConsolidationIssue(code=str(e["code"]), message=str(e["message"]), detail=e.get("detail"))
                for e in (d.get("errors") or [])
            ],
            meta=dict(d.get("meta") or {}),
        )
