"""
SDC Variable Store
==================
Flat name → value table for TCL ``set`` variables, plus recursive
textual substitution of ``$name`` / ``${name}`` references.

There is no scoping: the last ``set`` wins. Substitution runs a bounded
number of passes so cyclic definitions terminate.
"""
import re
from dataclasses import dataclass, field

MAX_SUBSTITUTION_PASSES = 10

_REFERENCE_RE = re.compile(
    r"(?P<escape>\\)?\$(?:\{(?P<braced>[^}]+)\}|(?P<plain>[A-Za-z0-9_]+(?:::[A-Za-z0-9_]+)*))"
)


@dataclass
class SubstitutionResult:
    """Substituted text plus every distinct unbound name seen, in first-seen order."""
    text: str
    undefined: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.undefined


class VariableStore:
    """
    Usage:
        store = VariableStore()
        store.set("period", "10")
        store.substitute("-period $period").text   # "-period 10"
    """

    def __init__(self):
        self._values: dict[str, str] = {}

    def set(self, name: str, value: str):
        self._values[name] = value

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def exists(self, name: str) -> bool:
        return name in self._values

    def unset(self, name: str) -> bool:
        """Remove a binding. Returns False if it was not bound."""
        return self._values.pop(name, None) is not None

    def __len__(self) -> int:
        return len(self._values)

    def substitute(self, text: str) -> SubstitutionResult:
        """Replace bound references until nothing changes or the pass cap is hit."""
        if "$" not in text:
            return SubstitutionResult(text)

        undefined: list[str] = []

        def replace(match: re.Match) -> str:
            if match.group("escape"):
                return match.group(0)
            name = match.group("braced")
            if name is None:
                name = match.group("plain")
            if name in self._values:
                return self._values[name]
            if name not in undefined:
                undefined.append(name)
            return match.group(0)

        current = text
        for _ in range(MAX_SUBSTITUTION_PASSES):
            updated = _REFERENCE_RE.sub(replace, current)
            if updated == current:
                break
            current = updated
        return SubstitutionResult(current, undefined)
