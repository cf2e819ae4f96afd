"""
Checker Test Suite
==================
End-to-end tests for checking SDC text: required arguments, value
validation, variables, clock references (eager and deferred), structural
rules, strict-mode advisories and warning suppression.

Usage:
    python -m pytest tests/test_checker.py -v
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sdcheck.checker import Checker, check
from sdcheck.config import CheckOptions
from sdcheck.errors import ErrorKind, WarningKind, Severity
from sdcheck.registry import ArgKind, ArgSpec, CommandSpec
from sdcheck.commands import DEFAULT_REGISTRY


CLEAN_DESIGN = """\
# Clocks
set clk_period 10.0
create_clock -name sys_clk -period $clk_period -waveform {0 5} [get_ports clk]
create_generated_clock -name div2 -source [get_ports clk] -divide_by 2 [get_pins u_div/Q]
set_clock_uncertainty 0.2 [get_clocks sys_clk]

# I/O
set_input_delay 2.0 -clock sys_clk [get_ports {din[0] din[1]}]
set_output_delay 1.5 -clock [get_clocks sys_clk] [get_ports dout]
set_load 0.05 [get_ports dout]

# Exceptions
set_false_path -from [get_ports rst_n]
set_multicycle_path 2 -setup -from [get_clocks sys_clk] -to [get_clocks div2]
"""


def kinds(diagnostics):
    return [d.kind for d in diagnostics]


# ─────────────────────────────────────────────
#  Baseline
# ─────────────────────────────────────────────

class TestBaseline(unittest.TestCase):

    def test_minimal_clock_is_clean(self):
        result = check("a.sdc", "create_clock -period 10.0 clk")
        self.assertEqual(result.errors, [])
        self.assertEqual(result.warnings, [])
        self.assertTrue(result.passed)

    def test_missing_period(self):
        result = check("a.sdc", "create_clock clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.MISSING_REQUIRED_ARG])
        self.assertIn("-period", result.errors[0].message)
        self.assertFalse(result.passed)

    def test_period_flag_without_value(self):
        result = check("a.sdc", "create_clock clk -period")
        self.assertEqual(kinds(result.errors), [ErrorKind.MISSING_REQUIRED_ARG])
        self.assertIn("-period", result.errors[0].message)

    def test_create_clock_needs_name_or_source(self):
        result = check("a.sdc", "create_clock -period 10")
        self.assertEqual(kinds(result.errors), [ErrorKind.MISSING_REQUIRED_ARG])

    def test_clean_design(self):
        result = check("top.sdc", CLEAN_DESIGN)
        self.assertEqual(result.errors, [], [str(e) for e in result.errors])
        self.assertEqual(result.warnings, [], [str(w) for w in result.warnings])

    def test_unpacks_to_errors_and_warnings(self):
        errors, warnings = check("a.sdc", "create_clock clk")
        self.assertEqual(len(errors), 1)
        self.assertEqual(warnings, [])

    def test_diagnostic_fields(self):
        result = check("top.sdc", "\n  create_clk -period 10 clk")
        error = result.errors[0]
        self.assertEqual(error.file, "top.sdc")
        self.assertEqual((error.line, error.col), (2, 3))
        self.assertEqual(error.severity, Severity.ERROR)

    def test_empty_file(self):
        self.assertTrue(check("a.sdc", "").passed)


# ─────────────────────────────────────────────
#  Commands and Arguments
# ─────────────────────────────────────────────

class TestArguments(unittest.TestCase):

    def test_unknown_command_suggests(self):
        result = check("a.sdc", "create_clok -period 10 clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNKNOWN_COMMAND])
        self.assertIn("create_clock", result.errors[0].suggestion)

    def test_invalid_period_format(self):
        result = check("a.sdc", "create_clock -period fast clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_TYPE])

    def test_period_out_of_range(self):
        result = check("a.sdc", "create_clock -period 20ms clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_period_with_unit(self):
        self.assertTrue(check("a.sdc", "create_clock -period 2.5ns clk").passed)

    def test_bad_waveform(self):
        result = check("a.sdc", "create_clock -period 10 -waveform {0 5 7} clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_TYPE])

    def test_too_few_positionals(self):
        source = "create_clock -name clk -period 10\nset_input_delay 2.0 -clock clk"
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_COUNT])
        self.assertEqual(result.errors[0].line, 2)

    def test_too_many_positionals(self):
        result = check("a.sdc", "set_case_analysis 0 a b")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_COUNT])

    def test_generated_clock_ratio_must_be_positive_integer(self):
        source = ("create_clock -name clk -period 10 [get_ports clk]\n"
                  "create_generated_clock -name g -source [get_ports clk] -divide_by 0 u/Q")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_load_out_of_range(self):
        result = check("a.sdc", "set_load 5nF [get_ports dout]")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_dynamic_values_not_validated(self):
        self.assertTrue(check("a.sdc", "create_clock -period [expr 2 * 5] clk").passed)

    def test_custom_command_table(self):
        registry = DEFAULT_REGISTRY.merged([
            CommandSpec("set_vendor_margin",
                        (ArgSpec("-corner", ArgKind.KEY_VALUE, required=True),),
                        1, 1),
        ])
        result = check("a.sdc", "set_vendor_margin 0.1", registry=registry)
        self.assertEqual(kinds(result.errors), [ErrorKind.MISSING_REQUIRED_ARG])


# ─────────────────────────────────────────────
#  Variables
# ─────────────────────────────────────────────

class TestVariables(unittest.TestCase):

    def test_set_then_use(self):
        self.assertTrue(check("a.sdc", "set p 10\ncreate_clock -period $p clk").passed)

    def test_undefined_variable(self):
        result = check("a.sdc", "create_clock -period $p clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_VARIABLE])
        self.assertIn("p", result.errors[0].message)

    def test_undefined_variable_reported_once_per_command(self):
        result = check("a.sdc", "set_load $cap $cap")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_VARIABLE])

    def test_unset_removes_binding(self):
        result = check("a.sdc", "set p 10\nunset p\ncreate_clock -period $p clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_VARIABLE])

    def test_redefinition_seen_after_cache(self):
        source = ("set p 10\ncreate_clock -name a -period $p\n"
                  "set p fast\ncreate_clock -name b -period $p")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_TYPE])
        self.assertEqual(result.errors[0].line, 4)

    def test_set_value_is_substituted(self):
        source = "set base 5\nset p $base\nunset base\ncreate_clock -period $p clk"
        self.assertTrue(check("a.sdc", source).passed)

    def test_variable_state_is_per_file(self):
        checker = Checker()
        self.assertTrue(checker.check("a.sdc", "set p 10").passed)
        result = checker.check("b.sdc", "create_clock -period $p clk")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_VARIABLE])

    def test_empty_braced_reference_in_quotes(self):
        result = check("a.sdc", 'create_clock -name "a${}b" -period 10')
        self.assertEqual(result.errors, [])

    def test_foreach_body_not_substituted(self):
        source = "foreach p {a b} { set_input_delay 1 $p }"
        self.assertTrue(check("a.sdc", source).passed)


# ─────────────────────────────────────────────
#  Clocks and References
# ─────────────────────────────────────────────

class TestClockReferences(unittest.TestCase):

    def test_duplicate_clock(self):
        line = "create_clock -period 10 -name clk [get_ports clk]"
        result = check("a.sdc", f"{line}\n{line}")
        self.assertEqual(kinds(result.errors), [ErrorKind.DUPLICATE_CLOCK])
        self.assertEqual(result.errors[0].line, 2)

    def test_generated_clock_undefined_source_is_eager(self):
        result = check("a.sdc", "create_generated_clock -source undefined_clk gen")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_CLOCK])
        self.assertEqual(result.errors[0].line, 1)

    def test_generated_clock_source_defined_later_still_fails(self):
        source = ("create_generated_clock -source clk_a -divide_by 2 gen\n"
                  "create_clock -name clk_a -period 10")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_CLOCK])
        self.assertEqual(result.errors[0].line, 1)

    def test_generated_clock_source_on_clocked_port(self):
        source = ("create_clock -name clk -period 10 [get_ports clk_in]\n"
                  "create_generated_clock -name g -source [get_ports clk_in] -divide_by 2 u/Q")
        self.assertTrue(check("a.sdc", source).passed)

    def test_generated_clock_source_moved_from_positional(self):
        source = ("create_clock -name clk -period 10\n"
                  "create_generated_clock -name g -source -divide_by 2 clk u/Q")
        self.assertTrue(check("a.sdc", source).passed)

    def test_generated_clock_lone_positional_becomes_source(self):
        source = ("create_clock -name clk -period 10\n"
                  "create_generated_clock -name g -source -divide_by 2 clk")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_COUNT])
        self.assertEqual(result.errors[0].line, 2)

    def test_generated_clock_lone_positional_unknown_source(self):
        source = ("create_clock -name clk -period 10\n"
                  "create_generated_clock -name g -divide_by 2 u/Q -source")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors),
                         [ErrorKind.INVALID_ARGUMENT_COUNT, ErrorKind.UNDEFINED_CLOCK])
        self.assertIn("u/Q", result.errors[1].message)

    def test_generated_clock_source_without_value(self):
        source = ("create_clock -name clk -period 10\n"
                  "create_generated_clock -name g -divide_by 2 -source")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors),
                         [ErrorKind.MISSING_REQUIRED_ARG, ErrorKind.INVALID_ARGUMENT_COUNT])
        self.assertIn("has no value", result.errors[0].message)

    def test_digit_led_clock_name(self):
        source = ("create_clock -name 2x_clk -period 10\n"
                  "set_clock_uncertainty 0.1 [get_clocks 2x_clk]")
        self.assertTrue(check("a.sdc", source).passed)

    def test_self_referencing_generated_clock(self):
        result = check("a.sdc", "create_generated_clock -name g -source g pin")
        self.assertEqual(kinds(result.errors), [ErrorKind.SELF_REFERENCING_CLOCK])

    def test_self_referencing_clock_not_registered(self):
        source = ("create_generated_clock -name g -source g pin\n"
                  "create_clock -name g -period 5")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.SELF_REFERENCING_CLOCK])

    def test_clock_group_forward_reference(self):
        source = ("set_clock_groups -asynchronous -group clk_a -group clk_b\n"
                  "create_clock -name clk_a -period 10\n"
                  "create_clock -name clk_b -period 5")
        self.assertTrue(check("a.sdc", source).passed)

    def test_clock_group_never_defined(self):
        source = ("set_clock_groups -asynchronous -group clk_a -group ghost\n"
                  "create_clock -name clk_a -period 10")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_CLOCK])
        self.assertIn("ghost", result.errors[0].message)
        self.assertEqual(result.errors[0].line, 1)

    def test_io_delay_clock_is_eager(self):
        source = ("set_input_delay 1.0 -clock clk [get_ports din]\n"
                  "create_clock -name clk -period 10")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_CLOCK])
        self.assertEqual(result.errors[0].line, 1)

    def test_get_clocks_in_exception_is_deferred(self):
        source = ("set_false_path -from [get_clocks clk_a] -to [get_clocks clk_b]\n"
                  "create_clock -name clk_a -period 10\n"
                  "create_clock -name clk_b -period 5")
        self.assertTrue(check("a.sdc", source).passed)

    def test_undefined_clock_reported_once(self):
        source = ("set_false_path -from [get_clocks ghost]\n"
                  "set_false_path -to [get_clocks ghost]")
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [ErrorKind.UNDEFINED_CLOCK])
        self.assertEqual(result.errors[0].line, 1)

    def test_wildcard_clock_query_not_checked(self):
        self.assertTrue(check("a.sdc", "set_false_path -from [get_clocks clk_*]").passed)

    def test_duplicate_exception(self):
        line = "set_false_path -from [get_ports a] -to [get_ports b]"
        result = check("a.sdc", f"{line}\n{line}")
        self.assertEqual(kinds(result.errors), [ErrorKind.DUPLICATE_CONSTRAINT])

    def test_different_exceptions_not_duplicate(self):
        source = ("set_multicycle_path 2 -setup -from [get_ports a]\n"
                  "set_multicycle_path 1 -hold -from [get_ports a]")
        self.assertTrue(check("a.sdc", source).passed)


# ─────────────────────────────────────────────
#  Structure and Quality Warnings
# ─────────────────────────────────────────────

class TestStructure(unittest.TestCase):

    def test_unmatched_brace(self):
        result = check("a.sdc", "create_clock -period 10 -name c\nset_load 1 {dout")
        self.assertEqual(len(result.errors_of(ErrorKind.UNMATCHED_BRACE)), 1)

    def test_stray_closing_brace_fails(self):
        result = check("a.sdc", "create_clock -period 10.0 clk }\n")
        self.assertFalse(result.passed)
        self.assertEqual(kinds(result.errors), [ErrorKind.UNMATCHED_BRACE])
        self.assertIn("unexpected", result.errors[0].message)
        self.assertIn("stray", result.errors[0].suggestion)

    def test_stray_closing_brackets_fail(self):
        result = check("a.sdc", "create_clock -period 10.0 clk]\nset_false_path -from a ]")
        self.assertEqual(kinds(result.errors), [ErrorKind.UNMATCHED_BRACKET])

    def test_unmatched_quote(self):
        result = check("a.sdc", 'create_clock -period 10 -name "clk')
        self.assertEqual(len(result.errors_of(ErrorKind.UNMATCHED_QUOTE)), 1)

    def test_hierarchy_separator(self):
        self.assertTrue(check("a.sdc", "set_hierarchy_separator /").passed)
        result = check("a.sdc", "set_hierarchy_separator x")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_HIERARCHY_SEPARATOR])

    def test_wire_load_mode(self):
        self.assertTrue(check("a.sdc", "set_wire_load_mode top").passed)
        result = check("a.sdc", "set_wire_load_mode bogus")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_case_analysis_value(self):
        self.assertTrue(check("a.sdc", "set_case_analysis 0 [get_ports test_mode]").passed)
        result = check("a.sdc", "set_case_analysis maybe [get_ports test_mode]")
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_empty_object_list(self):
        result = check("a.sdc", "set_load 0.05 {}")
        self.assertEqual(kinds(result.errors), [ErrorKind.EMPTY_OBJECT_LIST])

    def test_empty_query(self):
        result = check("a.sdc", "set_false_path -to [get_ports {}]")
        self.assertEqual(kinds(result.errors), [ErrorKind.EMPTY_OBJECT_LIST])

    def test_filtered_query_not_empty(self):
        source = 'set_false_path -to [get_ports -filter "direction == out"]'
        self.assertTrue(check("a.sdc", source).passed)

    def test_negative_delay_warning(self):
        source = "create_clock -name clk -period 10\nset_input_delay -0.5 -clock clk [get_ports din]"
        result = check("a.sdc", source)
        self.assertTrue(result.passed)
        self.assertEqual(kinds(result.warnings), [WarningKind.NEGATIVE_DELAY])

    def test_zero_period(self):
        result = check("a.sdc", "create_clock -period 0 clk")
        self.assertEqual(kinds(result.warnings), [WarningKind.ZERO_PERIOD])
        self.assertEqual(kinds(result.errors), [ErrorKind.INVALID_ARGUMENT_VALUE])

    def test_large_uncertainty(self):
        source = "create_clock -name clk -period 10\nset_clock_uncertainty 1.5 [get_clocks clk]"
        result = check("a.sdc", source)
        self.assertTrue(result.passed)
        self.assertEqual(kinds(result.warnings), [WarningKind.LARGE_UNCERTAINTY])

    def test_suppressed_warning(self):
        source = "create_clock -name clk -period 10\nset_input_delay -0.5 -clock clk [get_ports din]"
        options = CheckOptions(suppress=["negative_delay"])
        self.assertEqual(check("a.sdc", source, options=options).warnings, [])

    def test_checking_continues_after_errors(self):
        source = "bogus_cmd\ncreate_clock clk\ncreate_clock -period fast c2"
        result = check("a.sdc", source)
        self.assertEqual(kinds(result.errors), [
            ErrorKind.UNKNOWN_COMMAND,
            ErrorKind.MISSING_REQUIRED_ARG,
            ErrorKind.INVALID_ARGUMENT_TYPE,
        ])


# ─────────────────────────────────────────────
#  Strict Mode
# ─────────────────────────────────────────────

class TestStrictMode(unittest.TestCase):

    def setUp(self):
        self.strict = CheckOptions(strict=True)

    def test_missing_name(self):
        result = check("a.sdc", "create_clock -period 10 [get_ports clk]", options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.MISSING_NAME])
        self.assertTrue(result.passed)

    def test_missing_name_off_by_default(self):
        self.assertEqual(check("a.sdc", "create_clock -period 10 [get_ports clk]").warnings, [])

    def test_bare_wildcard(self):
        result = check("a.sdc", "set_false_path -to *", options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.AMBIGUOUS_WILDCARD])

    def test_case_insensitive_duplicate_name(self):
        source = "create_clock -name CLK -period 10\ncreate_clock -name clk -period 10"
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(result.errors, [])
        self.assertEqual(kinds(result.warnings), [WarningKind.DUPLICATE_DEFINITION])

    def test_second_clock_on_source_without_add(self):
        source = ("create_clock -name a -period 10 [get_ports clk]\n"
                  "create_clock -name b -period 5 [get_ports clk]")
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.DUPLICATE_DEFINITION])
        with_add = source + " -add"
        self.assertEqual(check("a.sdc", with_add, options=self.strict).warnings, [])

    def test_io_delay_override(self):
        source = ("create_clock -name clk -period 10\n"
                  "set_input_delay 1 -clock clk [get_ports din]\n"
                  "set_input_delay 2 -clock clk [get_ports din]")
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.DUPLICATE_DEFINITION])

    def test_unrealistic_period(self):
        source = "create_clock -name c -period 5000"
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.UNREALISTIC_PERIOD])
        self.assertEqual(check("a.sdc", source).warnings, [])

    def test_unrealistic_transition(self):
        source = "set_input_transition 0.8 [get_ports din]"
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.UNREALISTIC_TRANSITION])

    def test_unrealistic_delay(self):
        source = "create_clock -name clk -period 10\nset_input_delay 200 -clock clk [get_ports din]"
        result = check("a.sdc", source, options=self.strict)
        self.assertEqual(kinds(result.warnings), [WarningKind.UNREALISTIC_DELAY])

    def test_strict_never_adds_errors(self):
        relaxed = check("top.sdc", CLEAN_DESIGN)
        strict = check("top.sdc", CLEAN_DESIGN, options=self.strict)
        self.assertEqual(kinds(relaxed.errors), kinds(strict.errors))


if __name__ == "__main__":
    unittest.main()
