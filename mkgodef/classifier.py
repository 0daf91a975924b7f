"""
Declaration classifier.

Walks a declaration tree once and buckets every in-scope node by the
category it is emitted in. The buckets are unordered; the generators sort
them before emitting anything.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, Union

from .parser.decl import Decl, DeclKind, VisitResult, walk

logger = logging.getLogger(__name__)

# Compiler built-ins never emitted as constants
DEFAULT_IGNORED_MACROS = frozenset({"__GNUC__", "__APPLE__"})

# Kinds emitted by the type block
TYPE_KINDS = frozenset({
    DeclKind.STRUCT_DECL,
    DeclKind.UNION_DECL,
    DeclKind.TYPEDEF_DECL,
    DeclKind.VAR_DECL,
    DeclKind.MACRO_EXPANSION,
})

# Kinds read through their parent, never bucketed on their own
_DROPPED_KINDS = frozenset({
    DeclKind.PARM_DECL,
    DeclKind.TYPE_REF,
    DeclKind.DECL_REF_EXPR,
    DeclKind.VISIBILITY_ATTR,
    DeclKind.PACKED_ATTR,
    DeclKind.FIELD_DECL,
})

# Kinds that arm the suppression of the following node
_ARMING_KINDS = frozenset({DeclKind.MACRO_DEFINITION, DeclKind.INCLUSION_DIRECTIVE})


class SuppressionState(Enum):
    NORMAL = auto()
    AWAITING_SUPPRESSED_EXPANSION = auto()


class MacroSuppression:
    """
    One-shot suppression of the node right after a macro definition or an
    inclusion directive (include guards, the directive's own expansion).

    arm() moves to AWAITING_SUPPRESSED_EXPANSION; consume() reports whether
    it was armed and always moves back to NORMAL.
    """

    def __init__(self) -> None:
        self.state = SuppressionState.NORMAL

    def arm(self) -> None:
        self.state = SuppressionState.AWAITING_SUPPRESSED_EXPANSION

    def consume(self) -> bool:
        armed = self.state is SuppressionState.AWAITING_SUPPRESSED_EXPANSION
        self.state = SuppressionState.NORMAL
        return armed

    def reset(self) -> None:
        self.state = SuppressionState.NORMAL


@dataclass
class DeclBuckets:
    """Declarations grouped by output category, in visit order."""
    functions: dict[str, Decl] = field(default_factory=dict)
    enums: dict[Decl, list[Decl]] = field(default_factory=dict)
    types: dict[DeclKind, list[Decl]] = field(default_factory=dict)
    unrecognized: dict[str, list[Decl]] = field(default_factory=dict)

    @property
    def has_content(self) -> bool:
        return bool(self.functions or self.enums or self.types)

    def summary(self) -> str:
        constants = sum(len(v) for v in self.enums.values())
        types = sum(len(v) for v in self.types.values())
        unknown = sum(len(v) for v in self.unrecognized.values())
        return (
            f"{len(self.functions)} functions, "
            f"{len(self.enums)} enums ({constants} constants), "
            f"{types} types, "
            f"{unknown} unrecognized"
        )


class DeclarationClassifier:
    """
    Buckets the declarations of one or more translation units.

    Only nodes whose source file path contains the directory of the header
    being processed are kept, which leaves out system headers included
    from elsewhere.
    """

    def __init__(self, ignored_macros: Iterable[str] = ()):
        """
        Args:
            ignored_macros: Macro names never emitted as constants, in
                addition to DEFAULT_IGNORED_MACROS
        """
        self.ignored_macros = DEFAULT_IGNORED_MACROS | frozenset(ignored_macros)
        self.buckets = DeclBuckets()
        self.suppression = MacroSuppression()

    def classify(self, root: Decl, header: Union[str, Path]) -> DeclBuckets:
        """
        Walk the tree of one header and add its declarations to the buckets.

        Args:
            root: Translation unit declaration
            header: Path of the header the unit was parsed from

        Returns:
            The accumulated buckets
        """
        scope = os.path.dirname(str(header))
        self.suppression.reset()

        walk(root, lambda node, parent: self._visit(node, parent, scope))

        logger.info("Classified %s: %s", header, self.buckets.summary())
        return self.buckets

    def _visit(self, node: Decl, parent: Decl, scope: str) -> VisitResult:
        file_name = node.file_name
        if scope not in file_name:
            logger.debug("ignore file %s", file_name)
            return VisitResult.CONTINUE

        kind = node.kind
        buckets = self.buckets

        if kind in _ARMING_KINDS:
            self.suppression.arm()
            return VisitResult.CONTINUE

        suppressed = self.suppression.consume()

        if kind is DeclKind.FUNCTION_DECL:
            buckets.functions[node.spelling] = node
            return VisitResult.RECURSE

        if kind is DeclKind.ENUM_DECL:
            buckets.enums[node] = []
            return VisitResult.RECURSE

        if kind is DeclKind.ENUM_CONSTANT_DECL:
            buckets.enums.setdefault(parent, []).append(node)
            return VisitResult.RECURSE

        if kind is DeclKind.MACRO_EXPANSION:
            name = node.display_name
            if suppressed:
                logger.debug("suppress macro expansion %s", name)
                return VisitResult.CONTINUE
            if name in self.ignored_macros:
                logger.debug("ignore macro %s", name)
                return VisitResult.CONTINUE
            buckets.types.setdefault(kind, []).append(node)
            return VisitResult.RECURSE

        if kind in TYPE_KINDS:
            buckets.types.setdefault(kind, []).append(node)
            return VisitResult.RECURSE

        if kind in _DROPPED_KINDS:
            return VisitResult.CONTINUE

        buckets.unrecognized.setdefault(node.kind_spelling, []).append(node)
        return VisitResult.CONTINUE
