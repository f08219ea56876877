from __future__ import annotations

import unittest

from contracts.line_group import LineGroup, LineGroupBuilder


class TestLineGroupBuilder(unittest.TestCase):
    def test_add_line_is_idempotent_across_promotion(self) -> None:
        b = LineGroup.builder("g")
        b.add_line("a").add_line("a")
        self.assertEqual(b.lines_total(), 1)
        b.add_line("b").add_line("a").add_line("c")
        self.assertEqual(b.lines_total(), 3)
        self.assertEqual(b.build().lines, frozenset({"a", "b", "c"}))

    def test_remove_line_demotes_and_ignores_absent(self) -> None:
        b = LineGroup.builder("g").add_line("a").add_line("b").add_line("c")
        b.remove_line("missing")
        self.assertEqual(b.lines_total(), 3)
        b.remove_line("a").remove_line("b")
        self.assertEqual(b.lines_total(), 1)
        self.assertTrue(b.has_line("c"))
        b.remove_line("c").remove_line("c")
        self.assertEqual(b.lines_total(), 0)
        self.assertEqual(b.build().lines, frozenset())

    def test_nest_group_overwrites_same_name(self) -> None:
        old = LineGroup.of("n", ["x"])
        new = LineGroup.of("n", ["y"])
        other = LineGroup.of("m", ["z"])

        g = LineGroup.builder("g").nest_group(old).nest_group(new).build()
        self.assertEqual(g.nested_group_names(), ["n"])
        self.assertIs(g.get_nested_group("n"), new)

        g2 = LineGroup.builder(g).nest_group(other).nest_group(old).build()
        self.assertEqual(g2.nested_group_names(), ["m", "n"])
        self.assertIs(g2.get_nested_group("n"), old)

    def test_built_group_does_not_alias_builder(self) -> None:
        b = LineGroup.builder("g").add_line("a").add_line("b")
        first = b.build()
        b.add_line("c").nest_group(LineGroup.of("n"))
        self.assertEqual(first.lines, frozenset({"a", "b"}))
        self.assertFalse(first.has_nested_groups())

    def test_builder_from_group_is_copy_on_write(self) -> None:
        nested = LineGroup.of("n", ["x"])
        original = LineGroup.of("g", ["a", "b"], nested=[nested])

        changed = LineGroup.builder(original).remove_line("a").add_line("c").nest_group(LineGroup.of("m")).build()

        self.assertEqual(original.lines, frozenset({"a", "b"}))
        self.assertEqual(original.nested_group_names(), ["n"])
        self.assertEqual(changed.name, "g")
        self.assertEqual(changed.lines, frozenset({"b", "c"}))
        self.assertEqual(changed.nested_group_names(), ["m", "n"])

    def test_group_collections_are_read_only(self) -> None:
        g = LineGroup.of("g", ["a"], nested=[LineGroup.of("n")])
        with self.assertRaises(AttributeError):
            g.lines.add("b")  # type: ignore[attr-defined]
        with self.assertRaises(TypeError):
            g.nested["m"] = LineGroup.of("m")  # type: ignore[index]

    def test_direct_construction_is_frozen(self) -> None:
        lines = {"a", "b"}
        nested = {"n": LineGroup.of("n")}
        g = LineGroup(name="g", lines=lines, nested=nested)  # type: ignore[arg-type]
        lines.add("c")
        nested["m"] = LineGroup.of("m")
        self.assertEqual(g.lines, frozenset({"a", "b"}))
        self.assertEqual(g.nested_group_names(), ["n"])

    def test_equality_hash_and_str(self) -> None:
        a = LineGroup.of("g", ["y", "x"], nested=[LineGroup.of("n", ["z"])])
        b = LineGroup.builder("g").add_line("x").add_line("y").nest_group(LineGroup.of("n", ["z"])).build()
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, LineGroup.of("g", ["x", "y"]))
        self.assertEqual(str(a), "[g:\nx\ny\ngroups=[n]]")
        self.assertEqual(str(LineGroup.of("e")), "[e:]")

    def test_to_dict_is_sorted(self) -> None:
        g = LineGroup.of("g", ["b", "a"], nested=[LineGroup.of("z"), LineGroup.of("m")])
        self.assertEqual(g.to_dict(), {"name": "g", "lines": ["a", "b"], "nested": ["m", "z"]})
        self.assertEqual(LineGroup.from_dict({"name": "g", "lines": ["b", "a"]}), LineGroup.of("g", ["a", "b"]))

    def test_builder_seeded_with_set(self) -> None:
        b = LineGroupBuilder("g", lines={"a", "b"})
        b.remove_line("a")
        self.assertEqual(b.build().lines, frozenset({"b"}))


if __name__ == "__main__":
    unittest.main()
