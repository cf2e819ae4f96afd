"""
SDC Diagnostics
===============
Error and warning records produced by a check, and the append-only
reporter that collects them.

Every record carries a stable, machine-readable kind so a repair loop
can act on it without parsing the message text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    """Severity of a diagnostic."""
    ERROR = "error"
    WARNING = "warning"


class ErrorKind(str, Enum):
    """Defects that make a constraint file fail."""
    MISSING_REQUIRED_ARG = "missing_required_arg"
    UNKNOWN_COMMAND = "unknown_command"
    INVALID_ARGUMENT_VALUE = "invalid_argument_value"
    INVALID_ARGUMENT_TYPE = "invalid_argument_type"
    INVALID_ARGUMENT_COUNT = "invalid_argument_count"
    UNMATCHED_BRACE = "unmatched_brace"
    UNMATCHED_BRACKET = "unmatched_bracket"
    UNMATCHED_QUOTE = "unmatched_quote"
    EMPTY_OBJECT_LIST = "empty_object_list"
    INVALID_HIERARCHY_SEPARATOR = "invalid_hierarchy_separator"
    UNDEFINED_VARIABLE = "undefined_variable"
    UNDEFINED_CLOCK = "undefined_clock"
    UNDEFINED_PORT = "undefined_port"
    UNDEFINED_PIN = "undefined_pin"
    DUPLICATE_CLOCK = "duplicate_clock"
    DUPLICATE_CONSTRAINT = "duplicate_constraint"
    SELF_REFERENCING_CLOCK = "self_referencing_clock"


class WarningKind(str, Enum):
    """Advisory findings. Each kind can be suppressed individually."""
    NEGATIVE_DELAY = "negative_delay"
    ZERO_PERIOD = "zero_period"
    LARGE_UNCERTAINTY = "large_uncertainty"
    AMBIGUOUS_WILDCARD = "ambiguous_wildcard"
    MISSING_NAME = "missing_name"
    DUPLICATE_DEFINITION = "duplicate_definition"
    UNREALISTIC_PERIOD = "unrealistic_period"
    UNREALISTIC_DELAY = "unrealistic_delay"
    UNREALISTIC_TRANSITION = "unrealistic_transition"


@dataclass(frozen=True)
class SdcDiagnostic:
    """A single located finding."""
    file: str
    line: int
    col: int
    kind: Enum
    message: str
    suggestion: Optional[str] = None

    severity = Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "col": self.col,
            "severity": self.severity.value,
            "kind": self.kind.value,
            "message": self.message,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        icon = "✘" if self.severity == Severity.ERROR else "⚠"
        text = f"  {icon} {self.file}:{self.line}:{self.col} [{self.kind.value}] {self.message}"
        if self.suggestion:
            text += f"\n      → {self.suggestion}"
        return text


@dataclass(frozen=True)
class SdcError(SdcDiagnostic):
    """A defect that blocks a 'passed' verdict."""
    severity = Severity.ERROR


@dataclass(frozen=True)
class SdcWarning(SdcDiagnostic):
    """An advisory finding; never affects the verdict."""
    severity = Severity.WARNING


class ErrorReporter:
    """
    Append-only collector for one file check.

    Usage:
        reporter = ErrorReporter("top.sdc", suppress={"negative_delay"})
        reporter.error(ErrorKind.UNKNOWN_COMMAND, 3, 1, "Unknown command 'foo'")
        if reporter.passed:
            ...
    """

    def __init__(self, file: str, suppress: frozenset[str] | set[str] | None = None):
        self.file = file
        self.suppress = frozenset(suppress or ())
        self.errors: list[SdcError] = []
        self.warnings: list[SdcWarning] = []

    def error(self, kind: ErrorKind, line: int, col: int, message: str,
              suggestion: Optional[str] = None) -> SdcError:
        record = SdcError(self.file, line, col, kind, message, suggestion)
        self.errors.append(record)
        return record

    def warning(self, kind: WarningKind, line: int, col: int, message: str,
                suggestion: Optional[str] = None) -> Optional[SdcWarning]:
        """Record a warning unless its kind is suppressed."""
        if kind.value in self.suppress:
            return None
        record = SdcWarning(self.file, line, col, kind, message, suggestion)
        self.warnings.append(record)
        return record

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def passed(self) -> bool:
        return not self.errors

    def result(self) -> "CheckResult":
        return CheckResult(self.file, list(self.errors), list(self.warnings))


@dataclass
class CheckResult:
    """Outcome of checking one file."""
    file: str
    errors: list[SdcError] = field(default_factory=list)
    warnings: list[SdcWarning] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def __iter__(self):
        # errors, warnings = result
        yield self.errors
        yield self.warnings

    def errors_of(self, kind: ErrorKind) -> list[SdcError]:
        return [e for e in self.errors if e.kind == kind]

    def warnings_of(self, kind: WarningKind) -> list[SdcWarning]:
        return [w for w in self.warnings if w.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "passed": self.passed,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
