"""
Declaration tree capability interface.

The generators never touch a concrete parser. They see declaration nodes
through the small Decl interface defined here, and walk them with walk().
ClangDecl in clang_parser.py is the libclang implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterator, Optional


class DeclKind(Enum):
    """
    Declaration kinds the classifier distinguishes.

    Values are the parser's kind spellings; buckets are ordered by them.
    """
    FUNCTION_DECL = "FunctionDecl"
    ENUM_DECL = "EnumDecl"
    ENUM_CONSTANT_DECL = "EnumConstantDecl"
    STRUCT_DECL = "StructDecl"
    UNION_DECL = "UnionDecl"
    TYPEDEF_DECL = "TypedefDecl"
    VAR_DECL = "VarDecl"
    FIELD_DECL = "FieldDecl"
    PARM_DECL = "ParmDecl"
    TYPE_REF = "TypeRef"
    DECL_REF_EXPR = "DeclRefExpr"
    VISIBILITY_ATTR = "attribute(visibility)"
    PACKED_ATTR = "attribute(packed)"
    MACRO_DEFINITION = "macro definition"
    MACRO_EXPANSION = "macro expansion"
    INCLUSION_DIRECTIVE = "inclusion directive"
    TRANSLATION_UNIT = "TranslationUnit"
    OTHER = ""

    @property
    def spelling(self) -> str:
        return self.value


class VisitResult(Enum):
    """Traversal directive returned by a walk() callback."""
    BREAK = 0     # stop visiting the remaining siblings
    CONTINUE = 1  # go to the next sibling without visiting children
    RECURSE = 2   # visit the children, then the next sibling


class Decl(ABC):
    """
    A node of a parsed C declaration tree.

    Implementations are read-only views; equal nodes must hash equal so
    they can key the enum bucket.
    """

    @property
    @abstractmethod
    def kind(self) -> DeclKind:
        pass

    @property
    def kind_spelling(self) -> str:
        """Kind spelling, also meaningful for DeclKind.OTHER nodes."""
        return self.kind.spelling

    @property
    @abstractmethod
    def spelling(self) -> str:
        """Raw C name."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Display name; empty for anonymous declarations."""
        pass

    @property
    @abstractmethod
    def file_name(self) -> str:
        """Source file of the node, empty when it has none (built-ins)."""
        pass

    @abstractmethod
    def children(self) -> Iterator["Decl"]:
        pass

    def arguments(self) -> list["Decl"]:
        """Parameters of a function declaration."""
        return []

    @property
    def type_spelling(self) -> str:
        """Canonical spelling of the node's type."""
        return ""

    @property
    def result_type_spelling(self) -> str:
        """Spelling of a function's result type."""
        return ""


Visitor = Callable[[Decl, Decl], VisitResult]


def walk(root: Decl, visitor: Visitor) -> None:
    """
    Depth-first walk over the descendants of root.

    The visitor is called with (node, parent) and decides whether the
    walk descends into the node.
    """
    stack: list[tuple[Decl, Iterator[Decl]]] = [(root, iter(root.children()))]

    while stack:
        parent, siblings = stack[-1]
        node: Optional[Decl] = next(siblings, None)
        if node is None:
            stack.pop()
            continue

        result = visitor(node, parent)
        if result is VisitResult.BREAK:
            stack.pop()
        elif result is VisitResult.RECURSE:
            stack.append((node, iter(node.children())))
