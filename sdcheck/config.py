"""
Check Options
=============
Run options for a check and loading them from a JSON config file.

A config file looks like:

    {
        "strict": true,
        "suppress": ["negative_delay", "missing_name"],
        "commands_file": "extra_commands.json"
    }

When no path is given, ``sdcheck.json`` in the current directory is used
if it exists; otherwise the defaults apply.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Optional

from .errors import WarningKind

log = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "sdcheck.json"


@dataclass(frozen=True)
class CheckOptions:
    """Options for one check run."""

    strict: bool = False                                    # add advisory-only checks
    suppress: frozenset[str] = field(default_factory=frozenset)  # warning kinds to drop
    commands_file: str = ""                                 # extra JSON command table

    def __post_init__(self):
        object.__setattr__(self, "suppress", normalize_suppress(self.suppress))

    def with_overrides(self, strict: Optional[bool] = None,
                       suppress: Optional[Iterable[str]] = None,
                       commands_file: Optional[str] = None) -> "CheckOptions":
        """Return a copy with the given fields replaced; suppress lists are merged."""
        changes: dict[str, Any] = {}
        if strict is not None:
            changes["strict"] = strict
        if suppress:
            changes["suppress"] = self.suppress | normalize_suppress(suppress)
        if commands_file:
            changes["commands_file"] = commands_file
        return replace(self, **changes)


def normalize_suppress(kinds: Iterable[str]) -> frozenset[str]:
    """Validate warning kind names; raises ValueError on unknown kinds."""
    valid = {k.value for k in WarningKind}
    result = set()
    for kind in kinds:
        value = kind.value if isinstance(kind, WarningKind) else str(kind).strip().lower()
        if value not in valid:
            raise ValueError(
                f"Unknown warning kind '{kind}'. Valid kinds: {sorted(valid)}"
            )
        result.add(value)
    return frozenset(result)


def options_from_dict(data: Mapping[str, Any], base_dir: str = "") -> CheckOptions:
    commands_file = data.get("commands_file", "") or ""
    if commands_file and base_dir and not os.path.isabs(commands_file):
        commands_file = os.path.join(base_dir, commands_file)
    return CheckOptions(
        strict=bool(data.get("strict", False)),
        suppress=normalize_suppress(data.get("suppress", [])),
        commands_file=commands_file,
    )


def load_options(path: Optional[str] = None) -> CheckOptions:
    """Load options from ``path``, or from ./sdcheck.json when present."""
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_NAME):
            return CheckOptions()
        path = DEFAULT_CONFIG_NAME

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    options = options_from_dict(data, base_dir=os.path.dirname(os.path.abspath(path)))
    log.info("Loaded options from %s (strict=%s, %d suppressed)",
             path, options.strict, len(options.suppress))
    return options
