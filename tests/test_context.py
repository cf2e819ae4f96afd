"""
Design Context Test Suite
=========================
Tests for object-query parsing and the per-file design model: clocks,
eager/deferred references, ports, groups and the constraint log.

Usage:
    python -m pytest tests/test_context.py -v
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sdcheck.context import (
    DesignContext, EAGER, DEFERRED, parse_object_query, object_names,
)


class TestObjectQuery(unittest.TestCase):

    def test_plain_name(self):
        self.assertEqual(object_names("clk"), ["clk"])

    def test_braced_list(self):
        self.assertEqual(object_names("{clk_a clk_b}"), ["clk_a", "clk_b"])

    def test_get_ports(self):
        query = parse_object_query("[get_ports {din[0] din[1]}]")
        self.assertEqual(query.query, "get_ports")
        self.assertEqual(query.names, ["din[0]", "din[1]"])
        self.assertFalse(query.has_options)

    def test_filter_value_skipped(self):
        query = parse_object_query('[get_cells -hierarchical -filter "ref_name == DFF" u_*]')
        self.assertEqual(query.names, ["u_*"])
        self.assertTrue(query.has_options)

    def test_nested_query_skipped(self):
        query = parse_object_query("[get_pins -of_objects [get_cells u1]]")
        self.assertEqual(query.names, [])

    def test_empty_query(self):
        query = parse_object_query("[get_ports {}]")
        self.assertEqual(query.query, "get_ports")
        self.assertEqual(query.names, [])


class TestClocks(unittest.TestCase):

    def setUp(self):
        self.ctx = DesignContext()

    def test_add_and_lookup(self):
        self.ctx.add_clock("clk", 10.0, "[get_ports clk_in]", 1, 1)
        self.assertTrue(self.ctx.is_clock_defined("clk"))
        self.assertEqual(self.ctx.clock_definition("clk").period, 10.0)
        self.assertEqual(self.ctx.clock_on_object("clk_in"), "clk")
        self.assertIsNone(self.ctx.clock_on_object("other"))

    def test_generated_clock_counts_as_defined(self):
        self.ctx.add_generated_clock("div2", "[get_pins u/CK]", 3, 1, master_clock="clk")
        self.assertTrue(self.ctx.is_clock_defined("div2"))
        self.assertEqual(self.ctx.all_clock_names(), ["div2"])

    def test_source_resolvable(self):
        self.ctx.add_clock("clk", 10.0, "[get_ports clk_in]", 1, 1)
        self.assertTrue(self.ctx.is_clock_source_resolvable("clk"))
        self.assertTrue(self.ctx.is_clock_source_resolvable("[get_ports clk_in]"))
        self.assertFalse(self.ctx.is_clock_source_resolvable("[get_pins pll/out]"))
        self.assertFalse(self.ctx.is_clock_source_resolvable(""))


class TestReferences(unittest.TestCase):

    def setUp(self):
        self.ctx = DesignContext()

    def test_deferred_forward_reference_resolves(self):
        self.ctx.reference_clock("clk_a", "set_clock_groups", "-group", 1, 1, DEFERRED)
        self.ctx.add_clock("clk_a", 5.0, "", 2, 1)
        self.assertEqual(self.ctx.unresolved_references(), {})

    def test_deferred_never_defined(self):
        self.ctx.reference_clock("ghost", "set_false_path", "-from", 4, 1)
        self.ctx.reference_clock("ghost", "set_false_path", "-to", 5, 1)
        unresolved = self.ctx.unresolved_references()
        self.assertEqual(list(unresolved), ["ghost"])
        self.assertEqual([r.line for r in unresolved["ghost"]], [4, 5])

    def test_eager_references_not_rechecked(self):
        self.ctx.reference_clock("ghost", "set_input_delay", "-clock", 1, 1, EAGER)
        self.assertEqual(self.ctx.unresolved_references(), {})

    def test_clock_groups(self):
        self.ctx.add_clock_group("asynchronous", ["a", "b"], 7)
        self.ctx.add_clock_group("asynchronous", ["c"], 7)
        self.assertEqual(len(self.ctx.groups_for_clock("a")), 1)
        self.assertEqual(self.ctx.groups_for_clock("z"), [])


class TestPortsAndConstraints(unittest.TestCase):

    def setUp(self):
        self.ctx = DesignContext()

    def test_register_port(self):
        self.ctx.register_port("din", "input", "clk")
        self.ctx.register_port("rst_n", "input")
        self.assertEqual(self.ctx.ports_for_clock("clk"), ["din"])
        self.assertEqual(self.ctx.unclocked_ports(), ["rst_n"])

    def test_direction_conflict_becomes_inout(self):
        self.ctx.register_port("bidir", "input", "clk")
        self.ctx.register_port("bidir", "output", "clk")
        self.assertEqual(self.ctx.defined_ports["bidir"].direction, "inout")
        self.assertEqual(self.ctx.defined_ports["bidir"].clocks, ["clk"])

    def test_duplicate_constraint_lookup(self):
        self.ctx.log_constraint("set_false_path", "-from=a -to=b", None, 3, "")
        found = self.ctx.find_duplicate_constraint("set_false_path", "-from=a -to=b", "")
        self.assertEqual(found.line, 3)
        self.assertIsNone(self.ctx.find_duplicate_constraint("set_false_path", "-from=a", ""))
        self.assertIsNone(self.ctx.find_duplicate_constraint("set_false_path", "-from=a -to=b", "-setup"))


if __name__ == "__main__":
    unittest.main()
