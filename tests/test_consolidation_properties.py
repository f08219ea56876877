from __future__ import annotations

import random
import unittest
from collections import Counter

from consolidation import ConsolidationConfig, consolidate, consolidate_result
from consolidation.invariants import (
    content_mismatches,
    disjointness_violations,
    effective_lines,
    flatten,
    verify,
)
from consolidation.errors import ConsolidationInvariantError
from contracts.line_group import LineGroup


def _random_profiles(seed: int) -> list[LineGroup]:
    rng = random.Random(seed)
    pool = [f"/subsystem=s{i}:add" for i in range(14)]
    groups = []
    for i in range(rng.randint(2, 6)):
        lines = rng.sample(pool, rng.randint(1, 9))
        groups.append(LineGroup.of(f"profile-{i}", lines))
    return groups


class TestConsolidationProperties(unittest.TestCase):
    def test_invariants_hold_on_generated_profiles(self) -> None:
        cfg = ConsolidationConfig(name_strategy="counter")
        for seed in range(60):
            with self.subTest(seed=seed):
                inputs = _random_profiles(seed)
                out = consolidate(inputs, cfg)

                self.assertEqual(disjointness_violations(out), [])
                self.assertEqual(content_mismatches(inputs, out), [])
                for name, g in out.items():
                    self.assertEqual(g.name, name)

                # Every line ends up directly owned by exactly one group.
                owners = Counter(line for g in out.values() for line in g.lines)
                all_lines = set().union(*(g.lines for g in inputs))
                self.assertEqual(set(owners), all_lines)
                self.assertTrue(all(n == 1 for n in owners.values()))

                verify(inputs, out)

    def test_rerun_on_output_extracts_nothing(self) -> None:
        cfg = ConsolidationConfig(name_strategy="counter", name_prefix="again-")
        for seed in range(30):
            with self.subTest(seed=seed):
                out = consolidate(_random_profiles(seed), ConsolidationConfig(name_strategy="counter"))
                again = consolidate_result(flatten(out), cfg)

                self.assertEqual(again.meta["counts"]["extractions"], 0)
                self.assertEqual(set(again.groups), set(out))
                for name, g in out.items():
                    self.assertEqual(again.groups[name].lines, g.lines)

    def test_same_input_same_structure(self) -> None:
        cfg = ConsolidationConfig(name_strategy="counter")
        for seed in range(10):
            with self.subTest(seed=seed):
                r1 = consolidate_result(_random_profiles(seed), cfg).to_dict()
                r2 = consolidate_result(_random_profiles(seed), cfg).to_dict()
                self.assertEqual(r1, r2)

    def test_verify_reports_violations(self) -> None:
        inner = LineGroup.of("inner", ["x"])
        outer = LineGroup.of("outer", ["x", "y"], nested=[inner])
        self.assertEqual(disjointness_violations({"outer": outer, "inner": inner}), [("outer", "inner", "x")])

        original = LineGroup.of("outer", ["x", "y", "z"])
        with self.assertRaises(ConsolidationInvariantError) as ctx:
            verify([original], {"outer": outer, "inner": inner})
        self.assertEqual(len(ctx.exception.violations), 2)

    def test_effective_lines_follow_nesting(self) -> None:
        leaf = LineGroup.of("leaf", ["a"])
        mid = LineGroup.of("mid", ["b"], nested=[leaf])
        top = LineGroup.of("top", ["c"], nested=[mid, leaf])
        self.assertEqual(effective_lines(top), frozenset({"a", "b", "c"}))


if __name__ == "__main__":
    unittest.main()
