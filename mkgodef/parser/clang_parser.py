"""
Clang-based C header parser.

Uses libclang to parse C headers and exposes the resulting cursors through
the Decl capability interface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence

try:
    from clang.cindex import (
        Cursor,
        Diagnostic,
        Index,
        TranslationUnit,
        TranslationUnitLoadError,
    )
    HAS_CLANG = True
except ImportError:
    HAS_CLANG = False

from .decl import Decl, DeclKind

logger = logging.getLogger(__name__)


class ParseError(RuntimeError):
    """libclang rejected a header or its arguments."""

    def __init__(self, header: Path, message: str):
        super().__init__(f"Failed to parse {header}: {message}")
        self.header = header


# libclang cursor kind names -> DeclKind
_CURSOR_KINDS: dict[str, DeclKind] = {
    "FUNCTION_DECL": DeclKind.FUNCTION_DECL,
    "ENUM_DECL": DeclKind.ENUM_DECL,
    "ENUM_CONSTANT_DECL": DeclKind.ENUM_CONSTANT_DECL,
    "STRUCT_DECL": DeclKind.STRUCT_DECL,
    "UNION_DECL": DeclKind.UNION_DECL,
    "TYPEDEF_DECL": DeclKind.TYPEDEF_DECL,
    "VAR_DECL": DeclKind.VAR_DECL,
    "FIELD_DECL": DeclKind.FIELD_DECL,
    "PARM_DECL": DeclKind.PARM_DECL,
    "TYPE_REF": DeclKind.TYPE_REF,
    "DECL_REF_EXPR": DeclKind.DECL_REF_EXPR,
    "VISIBILITY_ATTR": DeclKind.VISIBILITY_ATTR,
    "PACKED_ATTR": DeclKind.PACKED_ATTR,
    "MACRO_DEFINITION": DeclKind.MACRO_DEFINITION,
    "MACRO_INSTANTIATION": DeclKind.MACRO_EXPANSION,
    "INCLUSION_DIRECTIVE": DeclKind.INCLUSION_DIRECTIVE,
    "TRANSLATION_UNIT": DeclKind.TRANSLATION_UNIT,
}

_TAG_KINDS = frozenset({DeclKind.STRUCT_DECL, DeclKind.UNION_DECL, DeclKind.ENUM_DECL})

# Markers libclang puts in the spelling of anonymous tags
_ANONYMOUS_MARKERS = ("(unnamed", "(anonymous")

_TAG_PREFIXES = ("struct ", "union ", "enum ")


class ClangDecl(Decl):
    """Decl view over a clang.cindex.Cursor."""

    def __init__(self, cursor: "Cursor"):
        self.cursor = cursor
        self._kind = _CURSOR_KINDS.get(cursor.kind.name, DeclKind.OTHER)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClangDecl):
            return NotImplemented
        return self.cursor == other.cursor

    def __hash__(self) -> int:
        return self.cursor.hash

    def __repr__(self) -> str:
        return f"ClangDecl({self.kind_spelling}, {self.spelling!r})"

    @property
    def kind(self) -> DeclKind:
        return self._kind

    @property
    def kind_spelling(self) -> str:
        if self._kind is DeclKind.OTHER:
            return self.cursor.kind.name
        return self._kind.spelling

    @property
    def spelling(self) -> str:
        return self.cursor.spelling or ""

    @property
    def display_name(self) -> str:
        if self._kind in _TAG_KINDS and self._is_anonymous():
            return ""
        return self.cursor.displayname or ""

    @property
    def file_name(self) -> str:
        location_file = self.cursor.location.file
        if location_file is None:
            return ""
        return location_file.name

    def children(self) -> Iterator[Decl]:
        for child in self.cursor.get_children():
            yield ClangDecl(child)

    def arguments(self) -> list[Decl]:
        return [ClangDecl(arg) for arg in self.cursor.get_arguments()]

    @property
    def type_spelling(self) -> str:
        return self.cursor.type.get_canonical().spelling

    @property
    def result_type_spelling(self) -> str:
        return self.cursor.result_type.spelling

    def _is_anonymous(self) -> bool:
        if any(marker in self.cursor.spelling for marker in _ANONYMOUS_MARKERS):
            return True
        # A tag named only by a typedef spells its type as the typedef name
        if not self.cursor.type.spelling.startswith(_TAG_PREFIXES):
            return True
        return bool(self.cursor.is_anonymous())


@dataclass
class ParsedUnit:
    """A parsed translation unit and its root declaration."""
    header: Path
    root: Decl
    translation_unit: "TranslationUnit"


class ClangParser:
    """
    Parser for C headers using libclang.

    The detailed preprocessing record is always requested so macro
    definitions, macro expansions and inclusion directives show up in
    the declaration tree.
    """

    def __init__(
        self,
        clang_args: Optional[Sequence[str]] = None,
        include_dirs: Optional[Sequence[Path]] = None,
    ):
        """
        Initialize the parser.

        Args:
            clang_args: Extra arguments to pass to clang, in order
            include_dirs: Additional include directories
        """
        if not HAS_CLANG:
            raise ImportError(
                "libclang is required for parsing. "
                "Install with: pip install libclang"
            )

        self.clang_args = list(clang_args or [])
        self.include_dirs = list(include_dirs or [])

        self._index = Index.create()

    def _build_args(self, include_dirs: Sequence[Path]) -> list[str]:
        """Build clang argument list."""
        args = list(self.clang_args)

        for inc in [*self.include_dirs, *include_dirs]:
            args.append(f"-I{inc}")

        return args

    def parse(
        self,
        header: Path,
        unsaved: Optional[tuple[str, str]] = None,
        include_dirs: Sequence[Path] = (),
    ) -> ParsedUnit:
        """
        Parse a single C header.

        Args:
            header: Path to the header file
            unsaved: Optional (filename, contents) in-memory source parsed
                instead of the header itself
            include_dirs: Include directories for this parse only

        Returns:
            ParsedUnit whose root is the translation unit declaration

        Raises:
            ParseError: libclang failed or reported errors
        """
        args = self._build_args(include_dirs)
        filename = str(header)
        unsaved_files = None
        if unsaved is not None:
            filename = unsaved[0]
            unsaved_files = [unsaved]

        logger.debug("Parsing %s with args %s", header, args)

        try:
            tu = self._index.parse(
                filename,
                args=args,
                unsaved_files=unsaved_files,
                options=(
                    TranslationUnit.PARSE_DETAILED_PROCESSING_RECORD
                    | TranslationUnit.PARSE_INCOMPLETE
                ),
            )
        except TranslationUnitLoadError as e:
            raise ParseError(header, str(e)) from e

        errors = [d for d in tu.diagnostics if d.severity >= Diagnostic.Error]
        if errors:
            error_msgs = "\n".join(str(e) for e in errors[:5])
            raise ParseError(header, error_msgs)

        return ParsedUnit(
            header=header,
            root=ClangDecl(tu.cursor),
            translation_unit=tu,
        )
