"""
SDC Command Registry
====================
Declarative per-command argument schema, consulted read-only by the
parser (flag/value disambiguation) and the checker (required arguments,
positional counts, validator dispatch).

A registry is immutable once built. Extending it from JSON produces a
new registry; the built-in table lives in :mod:`sdcheck.commands`.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

log = logging.getLogger(__name__)


class ArgKind(str, Enum):
    """How an argument appears on the command line."""
    FLAG = "flag"              # -add          (never takes a value)
    KEY_VALUE = "key_value"    # -period 10
    POSITIONAL = "positional"  # clk


@dataclass(frozen=True)
class ArgSpec:
    """One argument of a command."""
    name: str
    kind: ArgKind
    required: bool = False
    validator: Optional[str] = None
    value_less: bool = False

    @property
    def takes_value(self) -> bool:
        return self.kind == ArgKind.KEY_VALUE and not self.value_less


@dataclass(frozen=True)
class CommandSpec:
    """
    Schema for one command.

    max_positional of -1 means unbounded.
    """
    name: str
    args: tuple[ArgSpec, ...] = ()
    min_positional: int = 0
    max_positional: int = -1
    description: str = ""

    def arg(self, name: str) -> Optional[ArgSpec]:
        for spec in self.args:
            if spec.name == name:
                return spec
        return None

    @property
    def required_args(self) -> list[ArgSpec]:
        return [a for a in self.args if a.required and a.kind == ArgKind.KEY_VALUE]

    @property
    def positional_args(self) -> list[ArgSpec]:
        return [a for a in self.args if a.kind == ArgKind.POSITIONAL]

    @property
    def flag_names(self) -> list[str]:
        return [a.name for a in self.args if a.kind != ArgKind.POSITIONAL]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "min_positional": self.min_positional,
            "max_positional": self.max_positional,
            "args": [
                {
                    "name": a.name,
                    "kind": a.kind.value,
                    "required": a.required,
                    "validator": a.validator,
                    "value_less": a.value_less,
                }
                for a in self.args
            ],
        }


class CommandRegistry(Mapping[str, CommandSpec]):
    """
    Immutable name → CommandSpec lookup.

    Usage:
        registry = CommandRegistry(specs)
        spec = registry.get("create_clock")
        bigger = registry.merged(more_specs)
    """

    def __init__(self, specs: Iterable[CommandSpec]):
        table: dict[str, CommandSpec] = {}
        for spec in specs:
            table[spec.name] = spec
        self._table = MappingProxyType(table)

    def __getitem__(self, name: str) -> CommandSpec:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def names(self) -> list[str]:
        return sorted(self._table)

    def merged(self, specs: Iterable[CommandSpec]) -> "CommandRegistry":
        """Return a new registry with specs added or replacing existing entries."""
        specs = list(specs)
        log.debug("Merging %d command spec(s) into registry of %d", len(specs), len(self))
        return CommandRegistry([*self._table.values(), *specs])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CommandRegistry":
        return cls(specs_from_dict(data))


def _arg_from_dict(raw: Mapping[str, Any], command: str) -> ArgSpec:
    try:
        name = raw["name"]
        kind = ArgKind(raw.get("kind", ArgKind.KEY_VALUE.value))
    except KeyError:
        raise ValueError(f"Argument of command '{command}' is missing 'name'") from None
    except ValueError:
        valid = [k.value for k in ArgKind]
        raise ValueError(
            f"Argument '{raw.get('name')}' of command '{command}' has unknown kind "
            f"{raw.get('kind')!r}. Valid kinds: {valid}"
        ) from None
    return ArgSpec(
        name=name,
        kind=kind,
        required=bool(raw.get("required", False)),
        validator=raw.get("validator"),
        value_less=bool(raw.get("value_less", kind == ArgKind.FLAG)),
    )


def specs_from_dict(data: Mapping[str, Any]) -> list[CommandSpec]:
    """Build CommandSpecs from ``{"commands": [...]}`` data."""
    commands = data.get("commands")
    if not isinstance(commands, list):
        raise ValueError("Command table must contain a 'commands' list")

    specs = []
    for raw in commands:
        if "name" not in raw:
            raise ValueError(f"Command entry without 'name': {raw!r}")
        name = raw["name"]
        specs.append(CommandSpec(
            name=name,
            args=tuple(_arg_from_dict(a, name) for a in raw.get("args", [])),
            min_positional=int(raw.get("min_positional", 0)),
            max_positional=int(raw.get("max_positional", -1)),
            description=raw.get("description", ""),
        ))
    return specs


def load_command_table(path: str) -> list[CommandSpec]:
    """Read a JSON command table from disk."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    specs = specs_from_dict(data)
    log.info("Loaded %d command spec(s) from %s", len(specs), path)
    return specs
