"""
Macro constants generator.

A simpler cgo -godefs input producer: every macro definition reachable
from a header becomes a Go constant, every function declaration a comment
with its C signature. Each header is parsed through a small in-memory C
file that includes it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from .base import EmittedNames, Generator, GeneratedFile
from ..classifier import MacroSuppression
from ..config import MkgodefConfig
from ..fixer import Formatter, GoFormatError, GoFormatter
from ..naming import GO_RESERVED, export, guard_reserved
from ..parser.clang_parser import ParsedUnit
from ..parser.decl import Decl, DeclKind, VisitResult, walk

logger = logging.getLogger(__name__)


# Name of the in-memory C file including the header
UNSAVED_FILENAME = "unsaved.c"

# Portable subset of the flags cgo passes to the C compiler
DEFAULT_CLANG_ARGS = [
    "-w",          # no warnings
    "-Wno-error",  # warnings are not errors
    "-xc",         # input language is C
    "-ferror-limit=0",
    "-Wno-unknown-warning-option",
    "-Wno-unneeded-internal-declaration",
    "-Wno-unused-function",
    "-Qunused-arguments",
    "-fno-builtin",
    "-fno-lto",
]


def unsaved_include(header: Path) -> tuple[str, str]:
    """In-memory C source including header by its base name."""
    return UNSAVED_FILENAME, f"\n#include <{header.name}>\n"


def include_dir(header: Path) -> Path:
    """Directory the in-memory source must search for header."""
    return header.resolve().parent


@dataclass
class HeaderSection:
    """Constants and function signatures found through one header."""
    name: str
    constants: list[tuple[str, str]] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)


class ConstantsGenerator(Generator):
    """
    Generator for macro constant godefs input.

    Names are exported with leading underscores trimmed, pushed off Go
    reserved identifiers with a trailing "_", and deduplicated across all
    headers of the run.
    """

    def __init__(
        self,
        config: MkgodefConfig,
        formatter: Optional[Formatter] = None,
    ):
        super().__init__(config)
        self.formatter = formatter or GoFormatter(config.gofmt)

    def generate(self, units: Sequence[ParsedUnit]) -> GeneratedFile:
        """
        Generate the constants unit for parsed headers.

        Raises:
            GoFormatError: the generated text does not format; the raw
                text is available as the exception's source
        """
        emitted = EmittedNames()
        sections = [self.collect(unit.header, unit.root, emitted) for unit in units]

        raw = self.render(
            "constants.go.j2",
            package=self.config.package,
            sections=sections,
        )

        try:
            content = self.formatter(raw)
        except GoFormatError as e:
            e.source = raw
            raise

        return GeneratedFile(content=content, path=self.config.output_abs)

    def collect(self, header: Path, root: Decl, emitted: EmittedNames) -> HeaderSection:
        """Collect the top-level constants and functions of one unit."""
        section = HeaderSection(name=os.path.basename(str(header)))
        suppression = MacroSuppression()

        def visit(node: Decl, parent: Decl) -> VisitResult:
            kind = node.kind

            if kind is DeclKind.FUNCTION_DECL:
                args = ", ".join(
                    f"{arg.type_spelling} {arg.spelling}" for arg in node.arguments()
                )
                section.functions.append(
                    f"{node.result_type_spelling} {node.spelling}({args})"
                )
                return VisitResult.RECURSE

            if kind is DeclKind.MACRO_DEFINITION:
                # Include guard of the header just included
                if suppression.consume():
                    return VisitResult.CONTINUE

                # Compiler built-in
                if not node.file_name:
                    return VisitResult.CONTINUE

                c_name = node.spelling
                go_name = guard_reserved(export(c_name.lstrip("_")), GO_RESERVED)
                if self._claim(emitted, go_name, c_name):
                    section.constants.append((go_name, c_name))
                return VisitResult.CONTINUE

            if kind is DeclKind.INCLUSION_DIRECTIVE:
                suppression.arm()
                return VisitResult.CONTINUE

            logger.debug("%s: %s", node.kind_spelling, node.spelling)
            return VisitResult.CONTINUE

        walk(root, visit)
        return section
