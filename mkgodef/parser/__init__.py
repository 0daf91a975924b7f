"""
C header parsing module.
"""

from .decl import Decl, DeclKind, VisitResult, walk
from .clang_parser import ClangDecl, ClangParser, ParsedUnit, ParseError

__all__ = [
    "Decl",
    "DeclKind",
    "VisitResult",
    "walk",
    "ClangDecl",
    "ClangParser",
    "ParsedUnit",
    "ParseError",
]
