"""
SDC Design Context
==================
Running per-file model of the design as the constraints describe it:
clocks, generated clocks, constrained ports, clock references, the
timing-exception log and clock groups.

Clock references are recorded at the point of use whether or not the
clock is defined yet. Each reference is marked eager (already checked
by the command that made it) or deferred (checked once, after the whole
file, so forward references are tolerated).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from .lexer import Lexer, TokenType

EAGER = "eager"
DEFERRED = "deferred"

_QUERY_RE = re.compile(r"^\s*\[\s*(?P<query>[A-Za-z_]\w*)(?P<rest>.*)\]\s*$", re.DOTALL)
_QUERY_VALUE_FLAGS = frozenset({"-filter", "-of_objects"})


@dataclass
class ClockInfo:
    name: str
    period: Optional[float]     # nanoseconds, None when not statically known
    source: str
    line: int
    col: int
    source_objects: list[str] = field(default_factory=list)


@dataclass
class GeneratedClockInfo:
    name: str
    source: str
    line: int
    col: int
    master_clock: Optional[str] = None


@dataclass
class PortInfo:
    name: str
    direction: str              # "input" | "output" | "inout"
    is_clocked: bool = False
    clocks: list[str] = field(default_factory=list)


@dataclass
class ClockReference:
    command: str
    arg: str
    line: int
    col: int
    resolution: str = DEFERRED


@dataclass
class ConstraintEntry:
    command: str
    target: str
    clock: Optional[str]
    line: int
    type: str


@dataclass
class ClockGroup:
    type: str
    clocks: list[str]
    line: int


@dataclass
class ObjectQuery:
    """A ``[get_xxx names]`` expression, or a plain name list (query is None)."""
    query: Optional[str]
    names: list[str]
    has_options: bool = False   # -filter, -hierarchical, ...


def parse_object_query(value: str) -> ObjectQuery:
    """Pull object names out of ``[get_ports {a b}]``, ``{a b}`` or ``a``."""
    match = _QUERY_RE.match(value)
    if match is None:
        text = value.strip()
        if text.startswith("{") and text.endswith("}"):
            text = text[1:-1]
        return ObjectQuery(None, text.split())

    names: list[str] = []
    has_options = False
    tokens = Lexer(match.group("rest")).tokenize()
    skip_next = False
    for token in tokens:
        if skip_next:
            skip_next = False
            continue
        if token.type == TokenType.FLAG:
            has_options = True
            skip_next = token.value in _QUERY_VALUE_FLAGS
        elif token.type in (TokenType.STRING, TokenType.NUMBER, TokenType.COMMAND):
            if token.value.startswith("["):
                continue
            names.extend(token.value.split())
    return ObjectQuery(match.group("query"), names, has_options)


def object_names(value: str) -> list[str]:
    return parse_object_query(value).names


class DesignContext:
    """
    Per-file design model. Single-threaded; build a fresh one per file.

    Usage:
        ctx = DesignContext()
        ctx.add_clock("clk", 10.0, "[get_ports clk]", line=1, col=1)
        ctx.reference_clock("clk_b", "set_clock_groups", "-group", 2, 1)
        ctx.unresolved_references()   # {"clk_b": [ClockReference(...)]}
    """

    def __init__(self):
        self.defined_clocks: dict[str, ClockInfo] = {}
        self.defined_generated_clocks: dict[str, GeneratedClockInfo] = {}
        self.defined_ports: dict[str, PortInfo] = {}
        self.clock_references: dict[str, list[ClockReference]] = {}
        self.constraint_order: list[ConstraintEntry] = []
        self.clock_groups: list[ClockGroup] = []

    # ─────────────────────────────────────────────────────────
    #  Clocks
    # ─────────────────────────────────────────────────────────

    def add_clock(self, name: str, period: Optional[float], source: str,
                  line: int, col: int) -> ClockInfo:
        info = ClockInfo(name, period, source, line, col,
                         source_objects=object_names(source) if source else [])
        self.defined_clocks[name] = info
        return info

    def add_generated_clock(self, name: str, source: str, line: int, col: int,
                            master_clock: Optional[str] = None) -> GeneratedClockInfo:
        info = GeneratedClockInfo(name, source, line, col, master_clock)
        self.defined_generated_clocks[name] = info
        return info

    def is_clock_defined(self, name: str) -> bool:
        return name in self.defined_clocks or name in self.defined_generated_clocks

    def clock_definition(self, name: str) -> ClockInfo | GeneratedClockInfo | None:
        return self.defined_clocks.get(name) or self.defined_generated_clocks.get(name)

    def all_clock_names(self) -> list[str]:
        return [*self.defined_clocks, *self.defined_generated_clocks]

    def clock_on_object(self, obj: str) -> Optional[str]:
        """Name of a clock whose source objects include ``obj``."""
        for info in self.defined_clocks.values():
            if obj in info.source_objects:
                return info.name
        return None

    def is_clock_source_resolvable(self, source: str) -> bool:
        """Whether a -source value names a defined clock or a clocked object."""
        names = object_names(source)
        if not names:
            return False
        return all(self.is_clock_defined(n) or self.clock_on_object(n) for n in names)

    # ─────────────────────────────────────────────────────────
    #  References and groups
    # ─────────────────────────────────────────────────────────

    def reference_clock(self, name: str, command: str, arg: str, line: int, col: int,
                        resolution: str = DEFERRED) -> ClockReference:
        ref = ClockReference(command, arg, line, col, resolution)
        self.clock_references.setdefault(name, []).append(ref)
        return ref

    def add_clock_group(self, group_type: str, clocks: list[str], line: int) -> ClockGroup:
        group = ClockGroup(group_type, list(clocks), line)
        self.clock_groups.append(group)
        return group

    def unresolved_references(self) -> dict[str, list[ClockReference]]:
        """Deferred references to clocks never defined anywhere, in first-use order."""
        unresolved: dict[str, list[ClockReference]] = {}
        for name, refs in self.clock_references.items():
            if self.is_clock_defined(name):
                continue
            deferred = [r for r in refs if r.resolution == DEFERRED]
            if deferred:
                unresolved[name] = deferred
        return unresolved

    def groups_for_clock(self, name: str) -> list[ClockGroup]:
        return [g for g in self.clock_groups if name in g.clocks]

    # ─────────────────────────────────────────────────────────
    #  Ports
    # ─────────────────────────────────────────────────────────

    def register_port(self, name: str, direction: str, clock: Optional[str] = None) -> PortInfo:
        port = self.defined_ports.get(name)
        if port is None:
            port = PortInfo(name, direction)
            self.defined_ports[name] = port
        elif port.direction != direction:
            port.direction = "inout"
        if clock:
            port.is_clocked = True
            if clock not in port.clocks:
                port.clocks.append(clock)
        return port

    def ports_for_clock(self, clock: str) -> list[str]:
        return [p.name for p in self.defined_ports.values() if clock in p.clocks]

    def unclocked_ports(self) -> list[str]:
        return [p.name for p in self.defined_ports.values() if not p.is_clocked]

    # ─────────────────────────────────────────────────────────
    #  Constraint log
    # ─────────────────────────────────────────────────────────

    def log_constraint(self, command: str, target: str, clock: Optional[str],
                       line: int, constraint_type: str) -> ConstraintEntry:
        entry = ConstraintEntry(command, target, clock, line, constraint_type)
        self.constraint_order.append(entry)
        return entry

    def find_duplicate_constraint(self, command: str, target: str,
                                  constraint_type: str) -> Optional[ConstraintEntry]:
        """An earlier logged constraint identical in command, target and type."""
        for entry in self.constraint_order:
            if (entry.command == command and entry.target == target
                    and entry.type == constraint_type):
                return entry
        return None
