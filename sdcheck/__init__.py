# sdcheck — SDC constraint checker
"""
sdcheck: static checker for SDC (Synopsys Design Constraints) files.
Tokenizes, parses, substitutes variables and validates constraints,
reporting errors and warnings with line numbers and fix suggestions.
"""
from .errors import (
    Severity, ErrorKind, WarningKind,
    SdcDiagnostic, SdcError, SdcWarning, ErrorReporter, CheckResult,
)
from .lexer import Lexer, Token, TokenType
from .parser import Parser, ParsedCommand, is_valueless_flag
from .variables import VariableStore, SubstitutionResult
from .validators import ValidationStatus, ValidationResult, validate, get_validator
from .registry import ArgKind, ArgSpec, CommandSpec, CommandRegistry, load_command_table
from .commands import BUILTIN_COMMANDS, DEFAULT_REGISTRY
from .context import DesignContext
from .config import CheckOptions, load_options
from .checker import Checker, check

__version__ = "0.1.0"
__all__ = [
    "Severity", "ErrorKind", "WarningKind",
    "SdcDiagnostic", "SdcError", "SdcWarning", "ErrorReporter", "CheckResult",
    "Lexer", "Token", "TokenType",
    "Parser", "ParsedCommand", "is_valueless_flag",
    "VariableStore", "SubstitutionResult",
    "ValidationStatus", "ValidationResult", "validate", "get_validator",
    "ArgKind", "ArgSpec", "CommandSpec", "CommandRegistry", "load_command_table",
    "BUILTIN_COMMANDS", "DEFAULT_REGISTRY",
    "DesignContext",
    "CheckOptions", "load_options",
    "Checker", "check",
]
