"""
SDC Parser
==========
Single-pass parser that groups the Lexer's token stream into an ordered
list of ParsedCommand records.

Flag/value disambiguation needs command-specific knowledge the lexer
does not have: whether ``-add`` takes a value depends on the command.
The parser asks the CommandRegistry and falls back to a fixed set of
commonly value-less flags, then to a peek-ahead heuristic.

Recovery is tolerant: a line that does not start with a command word is
dropped up to the next separator and parsing continues.
"""
from dataclasses import dataclass, field
from typing import Optional

from .lexer import SEPARATORS, Token, TokenType
from .registry import ArgKind, CommandRegistry


# Flags that never take a value in any common SDC command.
COMMON_VALUELESS_FLAGS = frozenset({
    "-add", "-add_delay", "-rise", "-fall", "-min", "-max", "-setup", "-hold",
    "-early", "-late", "-invert", "-combinational", "-asynchronous",
    "-logically_exclusive", "-physically_exclusive", "-allow_paths",
    "-clock_fall", "-level_sensitive", "-edge_triggered",
    "-network_latency_included", "-source_latency_included",
    "-start", "-end", "-quiet", "-regexp", "-nocase", "-hierarchical",
    "-exact", "-leaf", "-no_propagate", "-ignore_clock_latency",
    "-positive", "-negative", "-stop_propagation", "-high", "-low",
    "-dont_scale", "-no_design_rule", "-subtract_pin_load", "-pin_load",
    "-wire_load", "-clock_path", "-data_path", "-cell_delay", "-net_delay",
    "-data", "-static", "-dynamic", "-increment", "-default", "-nocomplain",
    "-nonewline", "-flat", "-only_cells",
})

_VALUE_TOKENS = (TokenType.STRING, TokenType.NUMBER)
_STOP_TOKENS = (*SEPARATORS, TokenType.EOF)


@dataclass
class ParsedCommand:
    """
    One command: its name, positional words and flags.

    ``flags`` maps each keyed flag to its (last) value; ``flag_occurrences``
    keeps every keyed (flag, value) pair in source order so repeated flags
    like ``-group`` survive. A flag name is never both bare and keyed.
    """
    name: str
    positional: list[str] = field(default_factory=list)
    flags: dict[str, str] = field(default_factory=dict)
    bare_flags: set[str] = field(default_factory=set)
    flag_occurrences: list[tuple[str, str]] = field(default_factory=list)
    line: int = 0
    col: int = 0

    def has_flag(self, name: str) -> bool:
        return name in self.flags or name in self.bare_flags

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.flags.get(name, default)

    def values_of(self, name: str) -> list[str]:
        """Every value given to a keyed flag, in order."""
        return [v for f, v in self.flag_occurrences if f == name]

    def set_flag(self, name: str, value: str):
        self.bare_flags.discard(name)
        self.flags[name] = value
        self.flag_occurrences.append((name, value))

    def set_bare(self, name: str):
        if name not in self.flags:
            self.bare_flags.add(name)


def is_valueless_flag(command: str, flag: str,
                      registry: Optional[CommandRegistry] = None) -> bool:
    """Whether ``flag`` never takes a value for ``command``."""
    spec = registry.get(command) if registry is not None else None
    if spec is not None:
        arg = spec.arg(flag)
        if arg is not None:
            return arg.kind == ArgKind.FLAG or arg.value_less
    return flag in COMMON_VALUELESS_FLAGS


class Parser:
    """
    Usage:
        tokens = Lexer(source).tokenize()
        commands = Parser(tokens, registry).parse()
    """

    def __init__(self, tokens: list[Token], registry: Optional[CommandRegistry] = None):
        self.tokens = tokens
        self.registry = registry
        self.pos = 0
        self.dropped_lines: list[int] = []

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _at_stop(self) -> bool:
        return self._current().type in _STOP_TOKENS

    def _skip_separators(self):
        while self._current().type in SEPARATORS:
            self._advance()

    def _synchronize(self):
        """Skip tokens until the next separator or EOF."""
        while not self._at_stop():
            self._advance()

    def parse(self) -> list[ParsedCommand]:
        """Parse the token stream into commands, in source order."""
        commands: list[ParsedCommand] = []
        if not self.tokens:
            return commands

        while True:
            self._skip_separators()
            token = self._current()
            if token.type == TokenType.EOF:
                break
            if token.type != TokenType.COMMAND:
                self.dropped_lines.append(token.line)
                self._synchronize()
                continue
            commands.append(self._parse_command())
        return commands

    def _parse_command(self) -> ParsedCommand:
        name_token = self._advance()
        command = ParsedCommand(name=name_token.value,
                                line=name_token.line, col=name_token.col)

        while not self._at_stop():
            token = self._current()

            if token.type == TokenType.FLAG:
                self._advance()
                self._parse_flag(command, token.value)
            elif token.type in _VALUE_TOKENS:
                self._advance()
                command.positional.append(token.value)
            elif token.type == TokenType.VARIABLE:
                self._advance()
                command.positional.append(f"${token.value}")
            else:
                # stray end-markers and error tokens
                self._advance()

        return command

    def _parse_flag(self, command: ParsedCommand, flag: str):
        if is_valueless_flag(command.name, flag, self.registry):
            command.set_bare(flag)
            return

        following = self._current()
        if following.type in _VALUE_TOKENS:
            self._advance()
            command.set_flag(flag, following.value)
        elif following.type == TokenType.VARIABLE:
            self._advance()
            command.set_flag(flag, f"${following.value}")
        else:
            # next is a flag, separator or EOF: treat as value-less
            command.set_bare(flag)
