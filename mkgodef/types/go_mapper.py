"""
C type spelling to Go type mapper.
"""

from __future__ import annotations

from typing import Optional

from ..naming import export
from .registry import TypeRegistry, VOID_POINTER

# Qualifiers stripped from the front of a spelling, in this order
_QUALIFIERS = ("const ", "struct ", "enum ")

_VOID_POINTER_SPELLINGS = frozenset({VOID_POINTER, "void *"})


class GoTypeMapper:
    """
    Maps C type spellings to Go type names.

    Handles:
    - Built-in and fixed-width types (int -> int32, uint8_t -> uint8)
    - Qualifiers (const uint32_t -> uint32, struct foo -> Foo)
    - One pointer level (char * -> int8)
    - The void* sentinel (void * -> *byte, never stripped to void)
    - Unknown types, exported as a named Go type (my_type -> My_type)
    """

    def __init__(self, registry: Optional[TypeRegistry] = None):
        self.registry = registry or TypeRegistry()

    def normalize(self, type_str: str) -> str:
        """Strip qualifiers and one pointer level from a C type spelling."""
        for qualifier in _QUALIFIERS:
            if type_str.startswith(qualifier):
                type_str = type_str[len(qualifier):]

        if type_str in _VOID_POINTER_SPELLINGS:
            return VOID_POINTER

        # One "*" with its optional space: "void **" lands on "void *"
        if type_str.endswith("*"):
            type_str = type_str[:-1].rstrip()
            if type_str in _VOID_POINTER_SPELLINGS:
                return VOID_POINTER

        return type_str

    def map_type(self, type_str: str) -> str:
        """
        Map a C type spelling to a Go type name.

        Args:
            type_str: C type spelling (e.g., "const uint32_t", "struct foo *")

        Returns:
            Go type name (e.g., "uint32", "Foo")

        Only one pointer level is removed, so deeper pointers to anything
        but void fall through to the exported fallback: "char **" gives
        "Char *", which is not a Go type. The //sys lines carrying it are
        comments and need editing by hand.
        """
        normalized = self.normalize(type_str)

        info = self.registry.lookup(normalized)
        if info is not None:
            return info.go_name

        # Assume a struct/union/typedef/enum declared elsewhere
        return export(normalized)
