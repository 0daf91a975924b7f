"""
Command-line interface for mkgodef.

Usage:
    mkgodef <command> [options]

Commands:
    generate     Generate cgo -godefs input from C headers
    fix          Fix and reformat cgo -godefs output (stdin to stdout)
    constants    Generate Go constants from the macros of C headers
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .classifier import DeclarationClassifier
from .config import ConfigError, MkgodefConfig
from .fixer import GoFormatError, GoFormatter, fix
from .generators import ConstantsGenerator, GeneratedFile, GodefsGenerator
from .generators.constants import DEFAULT_CLANG_ARGS, include_dir, unsaved_include
from .parser import ClangParser, ParseError

logger = logging.getLogger(__name__)


def write_output(result: GeneratedFile) -> None:
    """Write generated content to its path, or stdout when it has none."""
    if result.path is None:
        sys.stdout.write(result.content)
        return

    result.path.parent.mkdir(parents=True, exist_ok=True)
    result.path.write_text(result.content)
    logger.info("Generated: %s", result.path)


def run_generate(config: MkgodefConfig) -> int:
    """Parse, classify and generate the godefs input of every header."""
    try:
        config.validate()
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    try:
        parser = ClangParser(clang_args=config.args)
    except ImportError as e:
        logger.error("%s", e)
        return 1

    classifier = DeclarationClassifier(ignored_macros=config.ignore_macros)

    # Translation units stay referenced while their cursors are in use
    units = []
    for header in config.headers:
        path = config.resolve_path(Path(header))
        logger.info("Parsing: %s", path)
        try:
            unit = parser.parse(path)
        except ParseError as e:
            logger.error("%s", e)
            return 1
        units.append(unit)
        classifier.classify(unit.root, path)

    buckets = classifier.buckets
    if not buckets.has_content:
        logger.warning("No declarations found in: %s", ", ".join(config.headers))

    result = GodefsGenerator(config).generate(buckets)
    write_output(result)
    sys.stderr.write(result.diagnostics)
    return 0


def run_fix(config: MkgodefConfig) -> int:
    """Fix cgo -godefs output read from stdin."""
    src = sys.stdin.read()
    try:
        out = fix(src, GoFormatter(config.gofmt))
    except GoFormatError as e:
        logger.error("%s", e)
        return 1

    sys.stdout.write(out)
    return 0


def run_constants(config: MkgodefConfig) -> int:
    """Generate Go constants from the macros of every header."""
    try:
        config.validate()
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    try:
        parser = ClangParser(clang_args=[*DEFAULT_CLANG_ARGS, *config.args])
    except ImportError as e:
        logger.error("%s", e)
        return 1

    units = []
    for header in config.headers:
        path = config.resolve_path(Path(header))
        logger.info("Parsing: %s", path)
        try:
            units.append(
                parser.parse(
                    path,
                    unsaved=unsaved_include(path),
                    include_dirs=[include_dir(path)],
                )
            )
        except ParseError as e:
            logger.error("%s", e)
            return 1

    try:
        result = ConstantsGenerator(config).generate(units)
    except GoFormatError as e:
        logger.error("%s", e)
        sys.stderr.write(e.source)
        return 1

    write_output(result)
    return 0


def apply_overrides(config: MkgodefConfig, args: argparse.Namespace) -> None:
    """Apply command line values over the loaded configuration."""
    if getattr(args, "package", None):
        config.package = args.package
    if getattr(args, "mode", None):
        config.modes = list(args.mode)
    if getattr(args, "header", None):
        config.headers = list(args.header)
    if getattr(args, "arg", None):
        config.args = list(args.arg)
    if getattr(args, "source", None):
        config.sources = list(args.source)
    if getattr(args, "ignore_macro", None):
        config.ignore_macros = list(args.ignore_macro)
    if getattr(args, "output", None):
        config.output = args.output
    if getattr(args, "headers", None):
        config.headers = [str(h) for h in args.headers]


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="mkgodef",
        description="cgo -godefs input generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate enums, types and functions of a header
  mkgodef generate --package foo --header include/foo.h -o ztypes_foo.go

  # Only the raw C function signatures
  mkgodef generate --mode rawfunc --header include/foo.h

  # Fix the output of cgo -godefs
  go tool cgo -godefs ztypes_foo.go | mkgodef fix > types_foo.go

  # Macro constants of several headers
  mkgodef constants --package foo include/foo.h include/bar.h
""",
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file (mkgodef.toml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate cgo -godefs input from C headers",
    )
    gen_parser.add_argument(
        "--package", "-p",
        help="Go package name",
    )
    gen_parser.add_argument(
        "--mode", "-m",
        action="append",
        help="Output category: enum, type, func or rawfunc (repeatable)",
    )
    gen_parser.add_argument(
        "--header", "-H",
        action="append",
        help="C header to analyze (repeatable)",
    )
    gen_parser.add_argument(
        "--arg", "-a",
        action="append",
        help="Argument passed to clang (repeatable)",
    )
    gen_parser.add_argument(
        "--source", "-s",
        action="append",
        help="Extra C source line for the cgo preamble (repeatable)",
    )
    gen_parser.add_argument(
        "--ignore-macro",
        action="append",
        help="Macro expansion to leave out (repeatable)",
    )
    gen_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file, stdout by default",
    )

    # fix subcommand
    subparsers.add_parser(
        "fix",
        help="Fix and reformat cgo -godefs output (stdin to stdout)",
    )

    # constants subcommand
    const_parser = subparsers.add_parser(
        "constants",
        help="Generate Go constants from the macros of C headers",
    )
    const_parser.add_argument(
        "--package", "-p",
        help="Go package name",
    )
    const_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file, stdout by default",
    )
    const_parser.add_argument(
        "headers",
        nargs="*",
        type=Path,
        help="C headers to analyze",
    )

    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    # Load configuration
    try:
        config = MkgodefConfig.load(args.config)
        apply_overrides(config, args)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    # Execute command
    if args.command == "generate":
        return run_generate(config)
    elif args.command == "fix":
        return run_fix(config)
    elif args.command == "constants":
        return run_constants(config)

    return 1


if __name__ == "__main__":
    sys.exit(main())
