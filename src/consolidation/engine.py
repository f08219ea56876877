from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from contracts.consolidation import ConsolidationResult
from contracts.line_group import LineGroup, LineGroupBuilder

from .config import ConsolidationConfig
from .errors import AmbiguousIdenticalGroups, DuplicateGroupName, PassLimitExceeded
from .folding import fold_supersets
from .naming import SyntheticNamer
from .ownership import OwnershipIndex

logger = logging.getLogger(__name__)

_ENGINE_VERSION = "line_groups_v1"


@dataclass(slots=True)
class _RunStats:
    folds: int = 0
    passes: int = 0
    extractions: int = 0
    canonical_reuses: int = 0


@dataclass(slots=True)
class _FixpointState:
    """Everything one consolidation call mutates. Never shared between calls."""

    groups: dict[str, LineGroup]
    index: OwnershipIndex
    namer: SyntheticNamer
    done: set[str] = field(default_factory=set)
    stats: _RunStats = field(default_factory=_RunStats)


@dataclass(frozen=True, slots=True)
class _Candidate:
    lines: frozenset[str]
    owners: frozenset[str]
    found_in: str


def _check_unique_names(groups: list[LineGroup]) -> None:
    seen: set[str] = set()
    for g in groups:
        if g.name in seen:
            raise DuplicateGroupName(g.name)
        seen.add(g.name)


def _find_candidate(state: _FixpointState) -> _Candidate | None:
    """
    First-found scan: groups in working order, lines in sorted order.

    The first line owned by more than one group fixes the owner signature; the
    candidate is that line plus every other unprocessed line of the same group
    whose owners include the whole signature. Groups scanned without finding
    a shared line are marked done.
    """

    processed: set[str] = set()
    for name, group in state.groups.items():
        if name in state.done:
            continue
        ordered = sorted(group.lines)
        for line in ordered:
            if line in processed:
                continue
            processed.add(line)
            owners = state.index.owners_of(line)
            assert owners, f"line {line!r} of group {name} has no registered owner"
            if len(owners) < 2:
                continue
            lines = [line]
            for other in ordered:
                if other in processed:
                    continue
                if state.index.owners_of(other) >= owners:
                    lines.append(other)
            return _Candidate(lines=frozenset(lines), owners=owners, found_in=name)
        state.done.add(name)
    return None


def _extract(state: _FixpointState, candidate: _Candidate) -> None:
    """Move the candidate lines out of every owner into one shared group."""

    canonical: LineGroup | None = None
    rebuilders: dict[str, LineGroupBuilder] = {}

    for owner_name in sorted(candidate.owners):
        group = state.groups[owner_name]
        # Owners hold every candidate line, so equal size means equal lines.
        if group.size() == len(candidate.lines) and not group.has_nested_groups():
            if canonical is not None:
                raise AmbiguousIdenticalGroups(canonical.name, group.name)
            canonical = group
            continue
        b = LineGroup.builder(group)
        for line in candidate.lines:
            b.remove_line(line)
            state.index.unregister(line, owner_name)
        rebuilders[owner_name] = b

    if canonical is not None:
        target = canonical
        state.stats.canonical_reuses += 1
        logger.debug("reusing %s for %d lines shared by %s", target.name, target.size(), sorted(candidate.owners))
    else:
        target = LineGroup.of(state.namer.next_name(), candidate.lines)
        logger.debug(
            "extracted %s with %d lines shared by %s (found in %s)",
            target.name,
            target.size(),
            sorted(candidate.owners),
            candidate.found_in,
        )

    for owner_name, b in rebuilders.items():
        state.groups[owner_name] = b.nest_group(target).build()

    if canonical is None:
        state.index.register_group(target)
        state.groups[target.name] = target

    state.stats.extractions += 1


def _run_fixpoint(state: _FixpointState, *, max_passes: int | None) -> None:
    while True:
        if max_passes is not None and state.stats.passes >= max_passes:
            raise PassLimitExceeded(max_passes)
        state.stats.passes += 1
        candidate = _find_candidate(state)
        if candidate is None:
            return
        _extract(state, candidate)


def _relink_nested(groups: dict[str, LineGroup]) -> dict[str, LineGroup]:
    """
    Point every nested reference at the final version of the referenced group.

    Rebased groups are new objects, so references captured during folding or
    earlier passes still see the content the group had at that moment.
    References to groups that never took part in the run are kept as given.
    """

    final: dict[str, LineGroup] = {}
    resolving: set[str] = set()

    def _resolve(name: str) -> LineGroup:
        if name in final:
            return final[name]
        assert name not in resolving, f"nesting cycle through group {name}"
        resolving.add(name)
        group = groups[name]
        if group.has_nested_groups():
            b = LineGroup.builder(group)
            for nested_name, captured in group.nested.items():
                if nested_name in groups:
                    b.nest_group(_resolve(nested_name))
                else:
                    b.nest_group(captured)
            group = b.build()
        resolving.discard(name)
        final[name] = group
        return group

    return {name: _resolve(name) for name in groups}


def consolidate_result(groups: Iterable[LineGroup], config: ConsolidationConfig | None = None) -> ConsolidationResult:
    cfg = config or ConsolidationConfig()
    inputs = list(groups)
    _check_unique_names(inputs)

    stats = _RunStats()
    working = inputs
    if cfg.fold_supersets:
        working, stats.folds = fold_supersets(inputs)

    state = _FixpointState(
        groups={g.name: g for g in working},
        index=OwnershipIndex.from_groups(working),
        namer=SyntheticNamer(cfg, taken=[n for g in inputs for n in (g.name, *g.nested)]),
        stats=stats,
    )
    pairs_in = state.index.pair_count()

    _run_fixpoint(state, max_passes=cfg.max_passes)

    out = _relink_nested(state.groups) if cfg.relink_nested else dict(state.groups)

    logger.info(
        "consolidated %d groups into %d (folds=%d extractions=%d reused=%d passes=%d)",
        len(inputs),
        len(out),
        stats.folds,
        stats.extractions,
        stats.canonical_reuses,
        stats.passes,
    )

    meta: dict[str, Any] = {
        "version": _ENGINE_VERSION,
        "config": cfg.to_dict(),
        "counts": {
            "groups_in": len(inputs),
            "groups_out": len(out),
            "distinct_lines": len(state.index),
            "ownership_pairs_in": pairs_in,
            "ownership_pairs_out": state.index.pair_count(),
            "folds": stats.folds,
            "passes": stats.passes,
            "extractions": stats.extractions,
            "canonical_reuses": stats.canonical_reuses,
        },
        "input_groups": [g.name for g in inputs],
    }
    return ConsolidationResult(ok=True, groups=out, errors=[], meta=meta)


def consolidate(groups: Iterable[LineGroup], config: ConsolidationConfig | None = None) -> dict[str, LineGroup]:
    """
    Factor lines shared by two or more groups out into shared nested groups.

    Returns name -> group for the reduced input groups plus every synthesized
    group. Raises DuplicateGroupName before any work when input names clash,
    and AmbiguousIdenticalGroups when two unnested groups both match an
    extracted line set exactly.
    """

    return consolidate_result(groups, config).groups
