"""
SDC Checker
===========
Drives every parsed command through variable substitution, structural
checks, value validation and design-context tracking, then runs one
whole-file pass for references that may legally point forward.

Checks per command, in order:
  1. ``set`` / ``unset`` update the variable store; ``echo`` / ``puts`` are ignored
  2. Unknown command name (no further checks for it)
  3. Variable substitution into every argument value
  4. create_generated_clock: re-home a positional onto a bare ``-source``
  5. Required arguments
  6. Positional argument count
  7. Validator dispatch per argument
  8. Always-on quality warnings
  9. Command-specific structural rules
 10. Strict-mode advisories (opt-in)
 11. Design-context tracking (clocks, ports, groups, exceptions)

Nothing aborts: every defect is recorded and checking continues.
"""
from __future__ import annotations

import difflib
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .commands import DEFAULT_REGISTRY, TCL_BUILTINS, TCL_CONTROL
from .config import CheckOptions
from .context import DEFERRED, EAGER, DesignContext, object_names, parse_object_query
from .errors import CheckResult, ErrorKind, ErrorReporter, WarningKind
from .lexer import Lexer
from .parser import ParsedCommand, Parser
from .registry import CommandRegistry, CommandSpec, load_command_table
from .validators import (
    ValidationStatus, is_dynamic, parse_time_ns, validate,
    validate_hierarchy_separator,
)
from .variables import SubstitutionResult, VariableStore

log = logging.getLogger(__name__)


IGNORED_COMMANDS = frozenset({"echo", "puts"})

DELAY_COMMANDS = frozenset({
    "set_input_delay", "set_output_delay", "set_max_delay", "set_min_delay",
    "set_clock_latency",
})
TRANSITION_COMMANDS = frozenset({
    "set_input_transition", "set_max_transition", "set_clock_transition",
})
EXCEPTION_COMMANDS = frozenset({
    "set_false_path", "set_multicycle_path", "set_max_delay", "set_min_delay",
})
NAMING_COMMANDS = frozenset({"create_clock", "create_generated_clock", "set_clock_groups"})
IO_DELAY_DIRECTIONS = {"set_input_delay": "input", "set_output_delay": "output"}

OBJECT_FLAGS = frozenset({
    "-from", "-to", "-through", "-rise_from", "-fall_from", "-rise_to",
    "-fall_to", "-rise_through", "-fall_through", "-group", "-source",
})
PATH_FLAGS = ("-from", "-rise_from", "-fall_from",
              "-through", "-rise_through", "-fall_through",
              "-to", "-rise_to", "-fall_to")
CLOCK_NAME_FLAGS = frozenset({"-clock", "-clocks", "-master_clock", "-rise_clock", "-fall_clock"})

WIRE_LOAD_MODES = frozenset({"top", "enclosed", "segmented"})
CASE_ANALYSIS_VALUES = frozenset({"0", "1", "zero", "one", "rise", "rising", "fall", "falling"})
WILDCARDS = frozenset({"*", "**"})

LARGE_UNCERTAINTY_NS = 1.0

# strict-mode plausibility limits (nanoseconds)
MIN_REALISTIC_PERIOD_NS = 0.1
MAX_REALISTIC_PERIOD_NS = 1000.0
MAX_REALISTIC_DELAY_NS = 100.0
MAX_REALISTIC_TRANSITION_NS = 0.5
MAX_REALISTIC_UNCERTAINTY_NS = 2.0

_GET_CLOCKS_RE = re.compile(r"\[\s*get_clocks\b[^\[\]]*\]")

_LEX_KINDS = {
    "unmatched_brace": ErrorKind.UNMATCHED_BRACE,
    "unmatched_bracket": ErrorKind.UNMATCHED_BRACKET,
    "unmatched_quote": ErrorKind.UNMATCHED_QUOTE,
}


def registry_for_options(options: CheckOptions) -> CommandRegistry:
    """The built-in registry, extended by the options' command file if any."""
    if not options.commands_file:
        return DEFAULT_REGISTRY
    return DEFAULT_REGISTRY.merged(load_command_table(options.commands_file))


def _is_wildcard_name(name: str) -> bool:
    return "*" in name or "?" in name


@dataclass
class FileState:
    """Mutable state for checking one file. Never shared between files."""
    reporter: ErrorReporter
    variables: VariableStore = field(default_factory=VariableStore)
    context: DesignContext = field(default_factory=DesignContext)
    substitution_cache: dict[str, SubstitutionResult] = field(default_factory=dict)
    seen_clock_names: dict[str, tuple[str, int]] = field(default_factory=dict)


class Checker:
    """
    Usage:
        checker = Checker(options=CheckOptions(strict=True))
        result = checker.check("top.sdc", text)
        if not result.passed:
            for e in result.errors:
                print(e)
    """

    def __init__(self, registry: Optional[CommandRegistry] = None,
                 options: Optional[CheckOptions] = None):
        self.options = options or CheckOptions()
        self.registry = registry if registry is not None else registry_for_options(self.options)

    def check(self, file_id: str, content: str) -> CheckResult:
        """Check one file's content. Each call uses fresh per-file state."""
        state = FileState(reporter=ErrorReporter(file_id, self.options.suppress))
        log.debug("Checking %s (%d chars, strict=%s)", file_id, len(content), self.options.strict)

        lexer = Lexer(content)
        tokens = lexer.tokenize()
        for diag in lexer.diagnostics:
            hint = ("Remove the stray closer or add its opener" if diag.stray
                    else "Close every opened delimiter")
            state.reporter.error(_LEX_KINDS[diag.kind], diag.line, diag.col, diag.message, hint)

        parser = Parser(tokens, self.registry)
        commands = parser.parse()
        if parser.dropped_lines:
            log.debug("%s: dropped malformed lines %s", file_id, parser.dropped_lines)

        for command in commands:
            self._check_command(state, command)

        self._finalize(state)

        result = state.reporter.result()
        log.info("%s: %d command(s), %d error(s), %d warning(s)",
                 file_id, len(commands), len(result.errors), len(result.warnings))
        return result

    # ─────────────────────────────────────────────────────────
    #  Per-command pipeline
    # ─────────────────────────────────────────────────────────

    def _check_command(self, state: FileState, cmd: ParsedCommand):
        if cmd.name == "set":
            self._handle_set(state, cmd)
            return
        if cmd.name == "unset":
            for name in cmd.positional:
                state.variables.unset(name)
            state.substitution_cache.clear()
            return
        if cmd.name in IGNORED_COMMANDS:
            return

        spec = self.registry.get(cmd.name)
        if spec is None:
            self._report_unknown(state, cmd)
            return

        if cmd.name not in TCL_CONTROL:
            cmd = self._substitute(state, cmd)
        self._rehome_generated_clock_source(cmd)
        self._check_required(state, cmd, spec)
        self._check_positional_count(state, cmd, spec)
        self._check_values(state, cmd, spec)
        self._check_quality(state, cmd)
        self._check_structure(state, cmd, spec)
        if self.options.strict:
            self._check_strict(state, cmd)
        self._track_design(state, cmd)

    def _handle_set(self, state: FileState, cmd: ParsedCommand):
        if len(cmd.positional) < 2:
            return
        name, value = cmd.positional[0], cmd.positional[1]
        state.variables.set(name, state.variables.substitute(value).text)
        state.substitution_cache.clear()

    def _report_unknown(self, state: FileState, cmd: ParsedCommand):
        close = difflib.get_close_matches(cmd.name, self.registry.names(), n=3, cutoff=0.6)
        suggestion = f"Did you mean: {', '.join(close)}?" if close else \
            "Check the command name against the SDC command set"
        state.reporter.error(ErrorKind.UNKNOWN_COMMAND, cmd.line, cmd.col,
                             f"Unknown command '{cmd.name}'", suggestion)

    # ─────────────────────────────────────────────────────────
    #  Step 3–4: substitution and argument repair
    # ─────────────────────────────────────────────────────────

    def _substitute_value(self, state: FileState, value: str) -> SubstitutionResult:
        cached = state.substitution_cache.get(value)
        if cached is None:
            cached = state.variables.substitute(value)
            state.substitution_cache[value] = cached
        return cached

    def _substitute(self, state: FileState, cmd: ParsedCommand) -> ParsedCommand:
        undefined: list[str] = []

        def resolve(value: str) -> str:
            result = self._substitute_value(state, value)
            for name in result.undefined:
                if name not in undefined:
                    undefined.append(name)
            return result.text

        resolved = ParsedCommand(name=cmd.name, line=cmd.line, col=cmd.col,
                                 positional=[resolve(v) for v in cmd.positional],
                                 bare_flags=set(cmd.bare_flags))
        for flag, value in cmd.flag_occurrences:
            resolved.set_flag(flag, resolve(value))

        for name in undefined:
            state.reporter.error(
                ErrorKind.UNDEFINED_VARIABLE, cmd.line, cmd.col,
                f"Variable '${name}' is used by {cmd.name} but never set",
                f"Add 'set {name} <value>' before this command",
            )
        return resolved

    def _rehome_generated_clock_source(self, cmd: ParsedCommand):
        if (cmd.name == "create_generated_clock" and "-source" in cmd.bare_flags
                and cmd.positional):
            cmd.set_flag("-source", cmd.positional.pop(0))

    # ─────────────────────────────────────────────────────────
    #  Step 5–7: structural argument checks
    # ─────────────────────────────────────────────────────────

    def _check_required(self, state: FileState, cmd: ParsedCommand, spec: CommandSpec):
        for arg in spec.required_args:
            if arg.name in cmd.flags:
                continue
            if arg.name in cmd.bare_flags:
                message = f"{cmd.name}: required argument '{arg.name}' has no value"
            else:
                message = f"{cmd.name}: missing required argument '{arg.name}'"
            state.reporter.error(ErrorKind.MISSING_REQUIRED_ARG, cmd.line, cmd.col,
                                 message, f"Add '{arg.name} <value>'")

        if cmd.name == "create_clock" and "-name" not in cmd.flags and not cmd.positional:
            state.reporter.error(
                ErrorKind.MISSING_REQUIRED_ARG, cmd.line, cmd.col,
                "create_clock needs '-name' or a source object list",
                "Add '-name <clock>' for a virtual clock or a source such as [get_ports clk]",
            )

    def _check_positional_count(self, state: FileState, cmd: ParsedCommand, spec: CommandSpec):
        count = len(cmd.positional)
        if count < spec.min_positional:
            state.reporter.error(
                ErrorKind.INVALID_ARGUMENT_COUNT, cmd.line, cmd.col,
                f"{cmd.name} expects at least {spec.min_positional} positional "
                f"argument(s), got {count}",
                self._usage_hint(spec),
            )
        elif spec.max_positional != -1 and count > spec.max_positional:
            extra = " ".join(cmd.positional[spec.max_positional:])
            state.reporter.error(
                ErrorKind.INVALID_ARGUMENT_COUNT, cmd.line, cmd.col,
                f"{cmd.name} expects at most {spec.max_positional} positional "
                f"argument(s), got {count}",
                f"Remove or brace-group the extra argument(s): {extra}",
            )

    @staticmethod
    def _usage_hint(spec: CommandSpec) -> str:
        names = [a.name for a in spec.positional_args]
        if names:
            return f"Usage: {spec.name} ... {' '.join(f'<{n}>' for n in names)} <objects>"
        return f"Provide {spec.min_positional} positional argument(s)"

    def _check_values(self, state: FileState, cmd: ParsedCommand, spec: CommandSpec):
        for flag, value in cmd.flag_occurrences:
            arg = spec.arg(flag)
            if arg is not None and arg.validator:
                self._run_validator(state, cmd, arg.validator, flag, value)

        for arg, value in zip(spec.positional_args, cmd.positional):
            if arg.validator:
                self._run_validator(state, cmd, arg.validator, f"<{arg.name}>", value)

    def _run_validator(self, state: FileState, cmd: ParsedCommand, validator_id: str,
                       label: str, value: str):
        if "$" in value:
            # unresolved variable, already reported
            return
        result = validate(validator_id, value)
        if result.ok:
            return
        kind = (ErrorKind.INVALID_ARGUMENT_TYPE
                if result.status == ValidationStatus.INVALID_FORMAT
                else ErrorKind.INVALID_ARGUMENT_VALUE)
        state.reporter.error(kind, cmd.line, cmd.col,
                             f"{cmd.name} {label}: {result.message}", result.suggestion)

    # ─────────────────────────────────────────────────────────
    #  Step 8: always-on quality warnings
    # ─────────────────────────────────────────────────────────

    def _check_quality(self, state: FileState, cmd: ParsedCommand):
        reporter = state.reporter

        if cmd.name in DELAY_COMMANDS and cmd.positional:
            delay = self._time_ns(cmd.positional[0])
            if delay is not None and delay < 0:
                reporter.warning(
                    WarningKind.NEGATIVE_DELAY, cmd.line, cmd.col,
                    f"{cmd.name} uses a negative delay ({cmd.positional[0]})",
                    "Confirm the negative value is intended",
                )

        if cmd.name == "create_clock" and "-period" in cmd.flags:
            period = self._time_ns(cmd.flags["-period"])
            if period == 0:
                reporter.warning(
                    WarningKind.ZERO_PERIOD, cmd.line, cmd.col,
                    "create_clock has a zero period",
                    "Use the real clock period, e.g. -period 10.0",
                )

        if cmd.name == "set_clock_uncertainty" and cmd.positional:
            uncertainty = self._time_ns(cmd.positional[0])
            if uncertainty is not None and uncertainty > LARGE_UNCERTAINTY_NS:
                reporter.warning(
                    WarningKind.LARGE_UNCERTAINTY, cmd.line, cmd.col,
                    f"clock uncertainty {cmd.positional[0]} exceeds {LARGE_UNCERTAINTY_NS:g}ns",
                    "Typical uncertainty is a small fraction of the clock period",
                )

    @staticmethod
    def _time_ns(value: str) -> Optional[float]:
        if is_dynamic(value) or "$" in value:
            return None
        return parse_time_ns(value)

    # ─────────────────────────────────────────────────────────
    #  Step 9: command-specific structural rules
    # ─────────────────────────────────────────────────────────

    def _check_structure(self, state: FileState, cmd: ParsedCommand, spec: CommandSpec):
        reporter = state.reporter
        first = cmd.positional[0] if cmd.positional else None

        if cmd.name == "set_hierarchy_separator" and first is not None:
            result = validate_hierarchy_separator(first)
            if not result.ok:
                reporter.error(ErrorKind.INVALID_HIERARCHY_SEPARATOR, cmd.line, cmd.col,
                               f"set_hierarchy_separator: {result.message}", result.suggestion)

        if cmd.name == "set_wire_load_mode" and first is not None and not is_dynamic(first):
            if first not in WIRE_LOAD_MODES:
                reporter.error(
                    ErrorKind.INVALID_ARGUMENT_VALUE, cmd.line, cmd.col,
                    f"set_wire_load_mode: '{first}' is not a wire load mode",
                    f"Use one of: {', '.join(sorted(WIRE_LOAD_MODES))}",
                )

        if cmd.name == "set_case_analysis" and first is not None and not is_dynamic(first):
            if first.lower() not in CASE_ANALYSIS_VALUES:
                reporter.error(
                    ErrorKind.INVALID_ARGUMENT_VALUE, cmd.line, cmd.col,
                    f"set_case_analysis: '{first}' is not a case value",
                    f"Use one of: {', '.join(sorted(CASE_ANALYSIS_VALUES))}",
                )

        if cmd.name in TCL_BUILTINS:
            return
        object_positionals = cmd.positional[len(spec.positional_args):]
        object_values = [(f"positional {v!r}", v) for v in object_positionals]
        object_values += [(f, v) for f, v in cmd.flag_occurrences if f in OBJECT_FLAGS]
        for label, value in object_values:
            if self._is_empty_object_list(value):
                reporter.error(
                    ErrorKind.EMPTY_OBJECT_LIST, cmd.line, cmd.col,
                    f"{cmd.name}: {label} is an empty object list",
                    "List at least one port, pin, cell or clock",
                )

    @staticmethod
    def _is_empty_object_list(value: str) -> bool:
        if value.strip() == "":
            return True
        query = parse_object_query(value)
        return (query.query is not None and query.query.startswith("get_")
                and not query.names and not query.has_options)

    # ─────────────────────────────────────────────────────────
    #  Step 10: strict-mode advisories
    # ─────────────────────────────────────────────────────────

    def _check_strict(self, state: FileState, cmd: ParsedCommand):
        reporter = state.reporter

        values = list(cmd.positional) + [v for _, v in cmd.flag_occurrences]
        for value in values:
            if value.strip() in WILDCARDS or any(n in WILDCARDS for n in object_names(value)):
                reporter.warning(
                    WarningKind.AMBIGUOUS_WILDCARD, cmd.line, cmd.col,
                    f"{cmd.name} uses a bare wildcard in '{value}'",
                    "Name the objects explicitly or use a narrower pattern",
                )
                break

        if cmd.name in NAMING_COMMANDS and "-name" not in cmd.flags:
            reporter.warning(
                WarningKind.MISSING_NAME, cmd.line, cmd.col,
                f"{cmd.name} has no -name",
                "Add '-name <name>' so reports and later constraints can refer to it",
            )

        if cmd.name in ("create_clock", "create_generated_clock"):
            self._check_suspected_duplicate_clock(state, cmd)

        self._check_unrealistic(state, cmd)

        if cmd.name in IO_DELAY_DIRECTIONS and len(cmd.positional) >= 2 \
                and "-add_delay" not in cmd.bare_flags:
            target = " ".join(object_names(cmd.positional[1]))
            kind = self._variant(cmd)
            earlier = state.context.find_duplicate_constraint(cmd.name, target, kind)
            if earlier is not None and earlier.clock == self._clock_name(cmd.get("-clock")):
                reporter.warning(
                    WarningKind.DUPLICATE_DEFINITION, cmd.line, cmd.col,
                    f"{cmd.name} on '{target}' overrides the one at line {earlier.line}",
                    "Add -add_delay to keep both, or remove one of them",
                )

    def _check_suspected_duplicate_clock(self, state: FileState, cmd: ParsedCommand):
        name = self._clock_name_for(cmd)
        if not name:
            return
        seen = state.seen_clock_names.get(name.lower())
        if seen is not None and seen[0] != name:
            state.reporter.warning(
                WarningKind.DUPLICATE_DEFINITION, cmd.line, cmd.col,
                f"Clock '{name}' differs only in case from '{seen[0]}' (line {seen[1]})",
                "Use clearly distinct clock names",
            )
        elif seen is None:
            state.seen_clock_names[name.lower()] = (name, cmd.line)

        if cmd.name == "create_clock" and "-add" not in cmd.bare_flags and cmd.positional:
            for obj in object_names(cmd.positional[0]):
                owner = state.context.clock_on_object(obj)
                if owner is not None and owner != name:
                    state.reporter.warning(
                        WarningKind.DUPLICATE_DEFINITION, cmd.line, cmd.col,
                        f"'{obj}' already carries clock '{owner}'; '{name}' replaces it",
                        "Add -add to define several clocks on the same source",
                    )

    def _check_unrealistic(self, state: FileState, cmd: ParsedCommand):
        reporter = state.reporter
        first = self._time_ns(cmd.positional[0]) if cmd.positional else None

        if cmd.name == "create_clock" and "-period" in cmd.flags:
            period = self._time_ns(cmd.flags["-period"])
            if period is not None and period > 0 and not (
                    MIN_REALISTIC_PERIOD_NS <= period <= MAX_REALISTIC_PERIOD_NS):
                reporter.warning(
                    WarningKind.UNREALISTIC_PERIOD, cmd.line, cmd.col,
                    f"clock period {cmd.flags['-period']} is outside the usual "
                    f"{MIN_REALISTIC_PERIOD_NS:g}-{MAX_REALISTIC_PERIOD_NS:g}ns range",
                    "Check the time unit of the period",
                )

        if cmd.name in DELAY_COMMANDS and first is not None and abs(first) > MAX_REALISTIC_DELAY_NS:
            reporter.warning(
                WarningKind.UNREALISTIC_DELAY, cmd.line, cmd.col,
                f"{cmd.name} delay {cmd.positional[0]} exceeds {MAX_REALISTIC_DELAY_NS:g}ns",
                "Check the time unit of the delay",
            )

        if cmd.name in TRANSITION_COMMANDS and first is not None \
                and first > MAX_REALISTIC_TRANSITION_NS:
            reporter.warning(
                WarningKind.UNREALISTIC_TRANSITION, cmd.line, cmd.col,
                f"{cmd.name} transition {cmd.positional[0]} exceeds "
                f"{MAX_REALISTIC_TRANSITION_NS:g}ns",
                "Check the time unit of the transition",
            )

        if cmd.name == "set_clock_uncertainty" and first is not None \
                and first > MAX_REALISTIC_UNCERTAINTY_NS:
            reporter.warning(
                WarningKind.UNREALISTIC_DELAY, cmd.line, cmd.col,
                f"clock uncertainty {cmd.positional[0]} exceeds "
                f"{MAX_REALISTIC_UNCERTAINTY_NS:g}ns",
                "Check the time unit of the uncertainty",
            )

    # ─────────────────────────────────────────────────────────
    #  Step 11: design-context tracking
    # ─────────────────────────────────────────────────────────

    @staticmethod
    def _clock_name(value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        names = object_names(value)
        return names[0] if names else None

    def _clock_name_for(self, cmd: ParsedCommand) -> Optional[str]:
        """-name, else the first source object."""
        if cmd.get("-name"):
            return cmd.get("-name").strip()
        return self._clock_name(cmd.positional[0]) if cmd.positional else None

    @staticmethod
    def _variant(cmd: ParsedCommand) -> str:
        return " ".join(sorted(cmd.bare_flags))

    def _track_design(self, state: FileState, cmd: ParsedCommand):
        if cmd.name == "create_clock":
            self._track_clock(state, cmd)
        elif cmd.name == "create_generated_clock":
            self._track_generated_clock(state, cmd)
        elif cmd.name == "set_clock_groups":
            self._track_clock_groups(state, cmd)
        else:
            if cmd.name in IO_DELAY_DIRECTIONS:
                self._track_io_delay(state, cmd)
            if cmd.name in EXCEPTION_COMMANDS:
                self._track_exception(state, cmd)
            self._record_clock_uses(state, cmd)

    def _track_clock(self, state: FileState, cmd: ParsedCommand):
        name = self._clock_name_for(cmd)
        if not name:
            return
        ctx = state.context
        existing = ctx.clock_definition(name)
        if existing is not None:
            state.reporter.error(
                ErrorKind.DUPLICATE_CLOCK, cmd.line, cmd.col,
                f"Clock '{name}' is already defined at line {existing.line}",
                "Give each clock a unique -name",
            )
            return
        period = self._time_ns(cmd.flags.get("-period", ""))
        ctx.add_clock(name, period, " ".join(cmd.positional), cmd.line, cmd.col)

    def _track_generated_clock(self, state: FileState, cmd: ParsedCommand):
        ctx = state.context
        reporter = state.reporter
        name = self._clock_name_for(cmd)
        source = cmd.get("-source")
        if not name:
            return

        source_names = object_names(source) if source else []
        if name in source_names:
            reporter.error(
                ErrorKind.SELF_REFERENCING_CLOCK, cmd.line, cmd.col,
                f"Generated clock '{name}' uses itself as its -source",
                "Point -source at the master clock's source pin or port",
            )
            return

        existing = ctx.clock_definition(name)
        if existing is not None:
            reporter.error(
                ErrorKind.DUPLICATE_CLOCK, cmd.line, cmd.col,
                f"Clock '{name}' is already defined at line {existing.line}",
                "Give each clock a unique -name",
            )
            return

        master = self._clock_name(cmd.get("-master_clock"))
        if master:
            ctx.reference_clock(master, cmd.name, "-master_clock", cmd.line, cmd.col, EAGER)
            if not ctx.is_clock_defined(master):
                reporter.error(
                    ErrorKind.UNDEFINED_CLOCK, cmd.line, cmd.col,
                    f"Master clock '{master}' of generated clock '{name}' is not defined",
                    self._define_clock_hint(ctx, master),
                )

        if source and "$" not in source and not (master and ctx.is_clock_defined(master)):
            for ref in source_names:
                ctx.reference_clock(ref, cmd.name, "-source", cmd.line, cmd.col, EAGER)
            if not ctx.is_clock_source_resolvable(source):
                shown = " ".join(source_names) or source
                reporter.error(
                    ErrorKind.UNDEFINED_CLOCK, cmd.line, cmd.col,
                    f"Source '{shown}' of generated clock '{name}' is not a defined clock "
                    f"or clock source",
                    self._define_clock_hint(ctx, source_names[0] if source_names else shown),
                )

        ctx.add_generated_clock(name, source or "", cmd.line, cmd.col, master)

    def _track_clock_groups(self, state: FileState, cmd: ParsedCommand):
        group_type = "asynchronous"
        for flag in ("-logically_exclusive", "-physically_exclusive", "-asynchronous"):
            if flag in cmd.bare_flags:
                group_type = flag.lstrip("-")
        for value in cmd.values_of("-group"):
            members = [m for m in object_names(value) if not _is_wildcard_name(m)]
            state.context.add_clock_group(group_type, members, cmd.line)
            for member in members:
                state.context.reference_clock(member, cmd.name, "-group", cmd.line, cmd.col,
                                              DEFERRED)

    def _track_io_delay(self, state: FileState, cmd: ParsedCommand):
        ctx = state.context
        clock = self._clock_name(cmd.get("-clock"))
        if clock and not _is_wildcard_name(clock):
            ctx.reference_clock(clock, cmd.name, "-clock", cmd.line, cmd.col, EAGER)
            if not ctx.is_clock_defined(clock):
                state.reporter.error(
                    ErrorKind.UNDEFINED_CLOCK, cmd.line, cmd.col,
                    f"{cmd.name} references clock '{clock}' before it is defined",
                    self._define_clock_hint(ctx, clock),
                )

        if len(cmd.positional) < 2:
            return
        ports = object_names(cmd.positional[1])
        for port in ports:
            ctx.register_port(port, IO_DELAY_DIRECTIONS[cmd.name], clock)
        ctx.log_constraint(cmd.name, " ".join(ports), clock, cmd.line, self._variant(cmd))

    def _track_exception(self, state: FileState, cmd: ParsedCommand):
        parts = []
        for flag in PATH_FLAGS:
            for value in cmd.values_of(flag):
                parts.append(f"{flag}={' '.join(value.split())}")
        target = " ".join(parts)
        kind = " ".join([self._variant(cmd), *cmd.positional]).strip()
        earlier = state.context.find_duplicate_constraint(cmd.name, target, kind)
        if earlier is not None:
            state.reporter.error(
                ErrorKind.DUPLICATE_CONSTRAINT, cmd.line, cmd.col,
                f"{cmd.name} is identical to the one at line {earlier.line}",
                "Remove the duplicate constraint",
            )
        clock = None
        for value in cmd.values_of("-from"):
            found = _GET_CLOCKS_RE.search(value)
            if found:
                clock = self._clock_name(found.group(0))
                break
        state.context.log_constraint(cmd.name, target, clock, cmd.line, kind)

    def _record_clock_uses(self, state: FileState, cmd: ParsedCommand):
        """Record [get_clocks ...] and clock-name flags as deferred references."""
        eager_flags = {"-clock"} if cmd.name in IO_DELAY_DIRECTIONS else set()
        uses: list[tuple[str, str]] = []
        for flag, value in cmd.flag_occurrences:
            if flag in eager_flags:
                continue
            if flag in CLOCK_NAME_FLAGS:
                uses.extend((flag, n) for n in object_names(value))
            else:
                for match in _GET_CLOCKS_RE.finditer(value):
                    uses.extend((flag, n) for n in object_names(match.group(0)))
        for index, value in enumerate(cmd.positional):
            for match in _GET_CLOCKS_RE.finditer(value):
                uses.extend((f"<arg {index + 1}>", n) for n in object_names(match.group(0)))

        for arg, name in uses:
            if "$" in name or _is_wildcard_name(name):
                continue
            state.context.reference_clock(name, cmd.name, arg, cmd.line, cmd.col, DEFERRED)

    @staticmethod
    def _define_clock_hint(ctx: DesignContext, name: str) -> str:
        close = difflib.get_close_matches(name, ctx.all_clock_names(), n=1, cutoff=0.6)
        if close:
            return f"Did you mean clock '{close[0]}'?"
        return f"Define '{name}' with create_clock before it is used"

    # ─────────────────────────────────────────────────────────
    #  Step 12: whole-file finalization
    # ─────────────────────────────────────────────────────────

    def _finalize(self, state: FileState):
        ctx = state.context
        for name, refs in ctx.unresolved_references().items():
            first = refs[0]
            where = f"{first.command} ({first.arg})"
            more = f" and {len(refs) - 1} other place(s)" if len(refs) > 1 else ""
            state.reporter.error(
                ErrorKind.UNDEFINED_CLOCK, first.line, first.col,
                f"Clock '{name}' is referenced by {where}{more} but never defined in this file",
                self._define_clock_hint(ctx, name),
            )


def check(file_id: str, content: str, options: Optional[CheckOptions] = None,
          registry: Optional[CommandRegistry] = None) -> CheckResult:
    """Check one file. Unpacks as ``errors, warnings = check(...)``."""
    return Checker(registry=registry, options=options).check(file_id, content)
