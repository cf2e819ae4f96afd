"""
SDC Value Validators
====================
Pure value-format and range predicates, dispatched by identifier.

Every validator takes the raw argument text and returns a
ValidationResult. Values that embed a bracketed sub-command
(``[expr ...]``, ``[get_ports ...]``) are not statically known and are
always accepted.

Unit handling: physical quantities accept an optional unit suffix
(longest suffix wins). Range validators normalize to SI base units;
unitless times are nanoseconds, unitless capacitances picofarads,
unitless voltages volts.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

log = logging.getLogger(__name__)


class ValidationStatus(Enum):
    OK = "ok"
    INVALID_FORMAT = "invalid_format"
    OUT_OF_RANGE = "out_of_range"
    EMPTY_VALUE = "empty_value"


@dataclass(frozen=True)
class ValidationResult:
    status: ValidationStatus
    message: str = ""
    suggestion: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ValidationStatus.OK


OK = ValidationResult(ValidationStatus.OK)

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")

HIERARCHY_SEPARATORS = frozenset("/@^#.|")


# ─────────────────────────────────────────────────────────────
#  Unit tables (suffix → multiplier to SI base unit)
# ─────────────────────────────────────────────────────────────

TIME_UNITS = {
    "fs": 1e-15, "ps": 1e-12, "ns": 1e-9, "us": 1e-6, "ms": 1e-3, "s": 1.0,
}
CAPACITANCE_UNITS = {
    "fF": 1e-15, "pF": 1e-12, "nF": 1e-9, "uF": 1e-6, "mF": 1e-3, "F": 1.0,
    "ff": 1e-15, "pf": 1e-12, "nf": 1e-9, "uf": 1e-6,
}
RESISTANCE_UNITS = {
    "mOhm": 1e-3, "Ohm": 1.0, "kOhm": 1e3, "MOhm": 1e6,
    "ohm": 1.0, "kohm": 1e3, "Mohm": 1e6,
}
VOLTAGE_UNITS = {"uV": 1e-6, "mV": 1e-3, "V": 1.0, "kV": 1e3}
CURRENT_UNITS = {"pA": 1e-12, "nA": 1e-9, "uA": 1e-6, "mA": 1e-3, "A": 1.0}
POWER_UNITS = {"pW": 1e-12, "nW": 1e-9, "uW": 1e-6, "mW": 1e-3, "W": 1.0, "kW": 1e3}
DISTANCE_UNITS = {"nm": 1e-9, "um": 1e-6, "mm": 1e-3, "cm": 1e-2, "m": 1.0}

NS = 1e-9
PF = 1e-12


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def is_dynamic(value: str) -> bool:
    """True if the value embeds a bracketed sub-command."""
    return "[" in value


def strip_wrapping(value: str) -> str:
    """Remove one level of surrounding quotes or braces and outer whitespace."""
    text = value.strip()
    if len(text) >= 2 and ((text[0] == '"' and text[-1] == '"')
                           or (text[0] == "{" and text[-1] == "}")):
        text = text[1:-1].strip()
    return text


def parse_number(text: str) -> Optional[float]:
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def split_unit(text: str, units: dict[str, float]) -> tuple[str, Optional[str]]:
    """Split ``10.5ns`` into ``("10.5", "ns")`` using the longest matching suffix."""
    for suffix in sorted(units, key=len, reverse=True):
        if text.endswith(suffix) and len(text) > len(suffix):
            return text[:-len(suffix)], suffix
    return text, None


def parse_quantity(value: str, units: dict[str, float], default_scale: float) -> Optional[float]:
    """Parse a unit-suffixed quantity into SI base units. None if malformed."""
    text = strip_wrapping(value)
    number_text, suffix = split_unit(text, units)
    number = parse_number(number_text.strip())
    if number is None:
        return None
    scale = units[suffix] if suffix else default_scale
    return number * scale


def parse_time(value: str) -> Optional[float]:
    """Parse a time value into seconds; unitless values are nanoseconds."""
    return parse_quantity(value, TIME_UNITS, NS)


def parse_time_ns(value: str) -> Optional[float]:
    seconds = parse_time(value)
    return None if seconds is None else seconds / NS


def _within(value: float, low: float, high: float) -> bool:
    return low - abs(low) * 1e-9 <= value <= high + abs(high) * 1e-9


def _empty(value: str) -> bool:
    return strip_wrapping(value) == ""


def _empty_result() -> ValidationResult:
    return ValidationResult(ValidationStatus.EMPTY_VALUE, "value is empty",
                            "Provide a value for this argument")


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    for suffix, scale in (("s", 1.0), ("ms", 1e-3), ("us", 1e-6),
                          ("ns", 1e-9), ("ps", 1e-12), ("fs", 1e-15)):
        if abs(seconds) >= scale or suffix == "fs":
            return f"{seconds / scale:g}{suffix}"
    return f"{seconds:g}s"


# ─────────────────────────────────────────────────────────────
#  Plain numbers
# ─────────────────────────────────────────────────────────────

def _numeric(value: str, integer: bool, minimum: Optional[float],
             exclusive: bool, what: str) -> ValidationResult:
    if is_dynamic(value):
        return OK
    if _empty(value):
        return _empty_result()
    text = strip_wrapping(value)
    if integer:
        if not _INTEGER_RE.match(text):
            return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                    f"'{value}' is not an integer",
                                    f"Use {what}, e.g. 2")
        number = float(int(text))
    else:
        number = parse_number(text)
        if number is None:
            return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                    f"'{value}' is not a number",
                                    f"Use {what}, e.g. 1.5")
    if minimum is not None:
        if (exclusive and number <= minimum) or (not exclusive and number < minimum):
            bound = "greater than" if exclusive else "at least"
            return ValidationResult(ValidationStatus.OUT_OF_RANGE,
                                    f"'{value}' must be {bound} {minimum:g}",
                                    f"Use {what}")
    return OK


def validate_real(value: str) -> ValidationResult:
    return _numeric(value, False, None, False, "a real number")


def validate_positive_real(value: str) -> ValidationResult:
    return _numeric(value, False, 0.0, True, "a positive number")


def validate_non_negative_real(value: str) -> ValidationResult:
    return _numeric(value, False, 0.0, False, "a non-negative number")


def validate_positive_integer(value: str) -> ValidationResult:
    return _numeric(value, True, 0.0, True, "a positive integer")


def validate_non_negative_integer(value: str) -> ValidationResult:
    return _numeric(value, True, 0.0, False, "a non-negative integer")


def validate_percentage(value: str) -> ValidationResult:
    if is_dynamic(value):
        return OK
    if _empty(value):
        return _empty_result()
    text = strip_wrapping(value)
    if text.endswith("%"):
        text = text[:-1].strip()
    number = parse_number(text)
    if number is None:
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"'{value}' is not a percentage",
                                "Use a number between 0 and 100, e.g. 50")
    if not 0.0 <= number <= 100.0:
        return ValidationResult(ValidationStatus.OUT_OF_RANGE,
                                f"percentage {number:g} is outside 0-100",
                                "Use a number between 0 and 100")
    return OK


def validate_hierarchy_separator(value: str) -> ValidationResult:
    text = strip_wrapping(value)
    if text == "":
        return _empty_result()
    if len(text) != 1 or text not in HIERARCHY_SEPARATORS:
        allowed = " ".join(sorted(HIERARCHY_SEPARATORS))
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"'{value}' is not a valid hierarchy separator",
                                f"Use exactly one of: {allowed}")
    return OK


# ─────────────────────────────────────────────────────────────
#  Unit-suffixed physical quantities
# ─────────────────────────────────────────────────────────────

def _quantity_validator(units: dict[str, float], what: str, example: str) -> Callable[[str], ValidationResult]:
    def validate(value: str) -> ValidationResult:
        if is_dynamic(value):
            return OK
        if _empty(value):
            return _empty_result()
        if parse_quantity(value, units, 1.0) is None:
            known = ", ".join(sorted(set(units), key=lambda u: units[u]))
            return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                    f"'{value}' is not a valid {what}",
                                    f"Use a number with an optional unit ({known}), e.g. {example}")
        return OK
    validate.__name__ = f"validate_{what}"
    validate.__doc__ = f"Accept a {what} with an optional unit suffix."
    return validate


validate_time = _quantity_validator(TIME_UNITS, "time", "10ns")
validate_capacitance = _quantity_validator(CAPACITANCE_UNITS, "capacitance", "0.05pF")
validate_resistance = _quantity_validator(RESISTANCE_UNITS, "resistance", "10kOhm")
validate_voltage = _quantity_validator(VOLTAGE_UNITS, "voltage", "0.9V")
validate_current = _quantity_validator(CURRENT_UNITS, "current", "1mA")
validate_power = _quantity_validator(POWER_UNITS, "power", "1mW")
validate_distance = _quantity_validator(DISTANCE_UNITS, "distance", "100um")


# ─────────────────────────────────────────────────────────────
#  Structured lists
# ─────────────────────────────────────────────────────────────

def list_items(value: str) -> list[str]:
    """Split a TCL list value like ``{0 5}`` into its items."""
    return strip_wrapping(value).split()


def validate_waveform(value: str) -> ValidationResult:
    """Exactly two edge times: {rise fall}."""
    if is_dynamic(value):
        return OK
    items = list_items(value)
    if not items:
        return _empty_result()
    if len(items) != 2:
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"waveform needs exactly 2 edge times, got {len(items)}",
                                "Use {rise_time fall_time}, e.g. {0 5}")
    if any(parse_time(item) is None for item in items):
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"waveform '{value}' contains a non-numeric edge",
                                "Use {rise_time fall_time}, e.g. {0 5}")
    return OK


def validate_edge_list(value: str) -> ValidationResult:
    """Exactly three integer edge indices: {1 3 5}."""
    if is_dynamic(value):
        return OK
    items = list_items(value)
    if not items:
        return _empty_result()
    if len(items) != 3 or not all(_INTEGER_RE.match(i) for i in items):
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"edge list '{value}' must be exactly 3 integers",
                                "Use three master-clock edge numbers, e.g. {1 3 5}")
    if any(int(i) < 1 for i in items):
        return ValidationResult(ValidationStatus.OUT_OF_RANGE,
                                f"edge numbers in '{value}' must be 1 or greater",
                                "Edges are counted from 1, e.g. {1 3 5}")
    return OK


def validate_number_list(value: str) -> ValidationResult:
    """Any number of numeric items."""
    if is_dynamic(value):
        return OK
    items = list_items(value)
    if not items:
        return _empty_result()
    bad = [i for i in items if parse_time(i) is None]
    if bad:
        return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                f"list '{value}' contains non-numeric item(s): {' '.join(bad)}",
                                "Use a brace-enclosed list of numbers, e.g. {0 2.5 0}")
    return OK


# ─────────────────────────────────────────────────────────────
#  Absolute-range validators
# ─────────────────────────────────────────────────────────────

def _range_validator(parse: Callable[[str], Optional[float]], low: float, high: float,
                     what: str, fmt: Callable[[float], str]) -> Callable[[str], ValidationResult]:
    def validate(value: str) -> ValidationResult:
        if is_dynamic(value):
            return OK
        if _empty(value):
            return _empty_result()
        number = parse(value)
        if number is None:
            return ValidationResult(ValidationStatus.INVALID_FORMAT,
                                    f"'{value}' is not a valid {what}",
                                    f"Use a number with an optional unit, between {fmt(low)} and {fmt(high)}")
        if not _within(number, low, high):
            return ValidationResult(ValidationStatus.OUT_OF_RANGE,
                                    f"{what} '{value}' is outside the allowed range "
                                    f"[{fmt(low)}, {fmt(high)}]",
                                    f"Use a {what} between {fmt(low)} and {fmt(high)}")
        return OK
    validate.__name__ = f"validate_{what.replace(' ', '_')}"
    return validate


def _parse_capacitance(value: str) -> Optional[float]:
    return parse_quantity(value, CAPACITANCE_UNITS, PF)


def _parse_voltage(value: str) -> Optional[float]:
    return parse_quantity(value, VOLTAGE_UNITS, 1.0)


def _format_farads(farads: float) -> str:
    if farads == 0:
        return "0"
    for suffix, scale in (("nF", 1e-9), ("pF", 1e-12)):
        if abs(farads) >= scale:
            return f"{farads / scale:g}{suffix}"
    return f"{farads / 1e-15:g}fF"


validate_clock_period = _range_validator(parse_time, 1e-12, 1e-2, "clock period", _format_seconds)
validate_delay_value = _range_validator(parse_time, 0.0, 1e-3, "delay", _format_seconds)
validate_transition_time = _range_validator(parse_time, 0.0, 1e-9, "transition time", _format_seconds)
validate_clock_uncertainty = _range_validator(parse_time, 0.0, 10e-9, "clock uncertainty", _format_seconds)
validate_clock_jitter = _range_validator(parse_time, 0.0, 1e-9, "clock jitter", _format_seconds)
validate_path_margin = _range_validator(parse_time, -10e-9, 10e-9, "path margin", _format_seconds)
validate_capacitance_value = _range_validator(_parse_capacitance, 0.0, 1e-9, "capacitance",
                                              _format_farads)
validate_glitch_threshold = _range_validator(_parse_voltage, 0.0, 1.0, "glitch threshold",
                                             lambda v: f"{v:g}V")


# ─────────────────────────────────────────────────────────────
#  Dispatch
# ─────────────────────────────────────────────────────────────

VALIDATORS: dict[str, Callable[[str], ValidationResult]] = {
    "real": validate_real,
    "positive_real": validate_positive_real,
    "non_negative_real": validate_non_negative_real,
    "positive_integer": validate_positive_integer,
    "non_negative_integer": validate_non_negative_integer,
    "percentage": validate_percentage,
    "hierarchy_separator": validate_hierarchy_separator,
    "time": validate_time,
    "capacitance": validate_capacitance,
    "resistance": validate_resistance,
    "voltage": validate_voltage,
    "current": validate_current,
    "power": validate_power,
    "distance": validate_distance,
    "waveform": validate_waveform,
    "edge_list": validate_edge_list,
    "number_list": validate_number_list,
    "clock_period": validate_clock_period,
    "delay_value": validate_delay_value,
    "transition_time": validate_transition_time,
    "clock_uncertainty": validate_clock_uncertainty,
    "clock_jitter": validate_clock_jitter,
    "path_margin": validate_path_margin,
    "capacitance_value": validate_capacitance_value,
    "glitch_threshold": validate_glitch_threshold,
}


def get_validator(validator_id: str) -> Callable[[str], ValidationResult]:
    """Look up a validator; raises KeyError for unknown ids."""
    try:
        return VALIDATORS[validator_id]
    except KeyError:
        raise KeyError(
            f"Unknown validator '{validator_id}'. Available: {sorted(VALIDATORS)}"
        ) from None


def validate(validator_id: str, value: str) -> ValidationResult:
    """Run the named validator. Unknown ids accept the value."""
    check = VALIDATORS.get(validator_id)
    if check is None:
        log.debug("No validator named %r; accepting %r", validator_id, value)
        return OK
    return check(value)
