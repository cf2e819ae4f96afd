"""
sdcheck CLI — Command-Line Interface for the SDC checker
=========================================================

Usage:
    # Check one or more constraint files
    sdcheck check top.sdc io.sdc
    sdcheck check top.sdc --strict --suppress negative_delay missing_name

    # Machine-readable output
    sdcheck check top.sdc --json

    # Extend the command table
    sdcheck check top.sdc --commands vendor_commands.json

    # Inspect the command table
    sdcheck commands
    sdcheck commands create_clock

    # Serve the checker over HTTP
    sdcheck serve --port 8765

Exit codes:
    0   Every file passed (warnings allowed).
    1   At least one file has errors.
    2   Usage or configuration problem (bad config, unreadable file).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .checker import Checker, registry_for_options
from .config import CheckOptions, load_options
from .errors import CheckResult, WarningKind

_log = logging.getLogger("sdcheck")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def _configure_logging(verbosity: int) -> None:
    """0 → WARNING, 1 → INFO, 2+ → DEBUG, on stderr."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("sdcheck")
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)


def _resolve_options(args) -> CheckOptions:
    """Config file first, then command-line overrides."""
    options = load_options(args.config)
    return options.with_overrides(
        strict=True if args.strict else None,
        suppress=args.suppress,
        commands_file=args.commands,
    )


def _print_result(result: CheckResult):
    status = "PASS" if result.passed else "FAIL"
    print(f"{result.file}: {status} "
          f"({len(result.errors)} error(s), {len(result.warnings)} warning(s))")
    for diag in [*result.errors, *result.warnings]:
        print(diag)


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_check(args) -> int:
    """Check SDC files and report findings."""
    try:
        options = _resolve_options(args)
        checker = Checker(options=options)
    except (OSError, ValueError) as e:
        _log.error("Invalid configuration: %s", e)
        return EXIT_USAGE

    results = []
    for path in args.files:
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            _log.error("Cannot read %s: %s", path, e)
            return EXIT_USAGE
        results.append(checker.check(path, content))

    if args.json:
        print(json.dumps({
            "passed": all(r.passed for r in results),
            "files": [r.to_dict() for r in results],
        }, indent=2))
    else:
        for result in results:
            _print_result(result)

    return EXIT_OK if all(r.passed for r in results) else EXIT_ERROR


def cmd_commands(args) -> int:
    """List known commands, or show one command's argument schema."""
    try:
        registry = registry_for_options(CheckOptions(commands_file=args.commands or ""))
    except (OSError, ValueError) as e:
        _log.error("Invalid command table: %s", e)
        return EXIT_USAGE

    if args.name:
        spec = registry.get(args.name)
        if spec is None:
            _log.error("Unknown command '%s'", args.name)
            return EXIT_USAGE
        if args.json:
            print(json.dumps(spec.to_dict(), indent=2))
            return EXIT_OK
        print(f"{spec.name}: {spec.description}" if spec.description else spec.name)
        for arg in spec.args:
            marks = []
            if arg.required:
                marks.append("required")
            if arg.validator:
                marks.append(f"validator={arg.validator}")
            suffix = f"  ({', '.join(marks)})" if marks else ""
            print(f"  {arg.name:<28} {arg.kind.value}{suffix}")
        upper = "any" if spec.max_positional == -1 else spec.max_positional
        print(f"  positional: {spec.min_positional}..{upper}")
        return EXIT_OK

    if args.json:
        print(json.dumps(registry.names(), indent=2))
    else:
        for name in registry.names():
            print(name)
    return EXIT_OK


def cmd_serve(args) -> int:
    """Launch the HTTP checking service."""
    from .server import run_server
    run_server(port=args.port, host=args.host)
    return EXIT_OK


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdcheck",
        description="sdcheck — static checker for SDC timing constraints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  sdcheck check top.sdc\n"
            "  sdcheck check top.sdc --strict --json\n"
            "  sdcheck commands create_clock\n"
            "  sdcheck serve --port 8765\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging on stderr (-v info, -vv debug)")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # check
    p_check = subparsers.add_parser("check", help="Check SDC files")
    p_check.add_argument("files", nargs="+", help="SDC files to check")
    p_check.add_argument("--strict", action="store_true",
                         help="Enable advisory strict-mode warnings")
    p_check.add_argument("--suppress", nargs="+", default=[], metavar="KIND",
                         choices=[k.value for k in WarningKind],
                         help="Warning kinds to suppress")
    p_check.add_argument("--config", default=None,
                         help="Options file (default: ./sdcheck.json when present)")
    p_check.add_argument("--commands", default=None,
                         help="Extra JSON command table")
    p_check.add_argument("--json", action="store_true", help="Print results as JSON")

    # commands
    p_cmds = subparsers.add_parser("commands", help="List known SDC commands")
    p_cmds.add_argument("name", nargs="?", help="Show one command's arguments")
    p_cmds.add_argument("--commands", default=None, help="Extra JSON command table")
    p_cmds.add_argument("--json", action="store_true", help="Print as JSON")

    # serve
    p_serve = subparsers.add_parser("serve", help="Serve the checker over HTTP")
    p_serve.add_argument("--port", default=8765, type=int, help="Port number (default: 8765)")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    commands = {
        "check": cmd_check,
        "commands": cmd_commands,
        "serve": cmd_serve,
    }

    if args.command in commands:
        return commands[args.command](args)
    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
