"""
Type registry for C to Go type mappings.

Lookups are exact string matches against normalized C spellings
(qualifiers and one pointer level already stripped by the mapper).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TypeKind(Enum):
    """Classification of C types."""
    BUILTIN = auto()      # int, float, double, etc.
    FIXED_WIDTH = auto()  # int32_t, uint64_t, etc.
    POINTER = auto()      # void*


@dataclass
class TypeInfo:
    """Information about a mapped type."""
    c_name: str
    go_name: str
    kind: TypeKind


# Spelling of the opaque pointer sentinel
VOID_POINTER = "void*"

# =============================================================================
# Built-in C Types
# =============================================================================

BUILTIN_TYPES: dict[str, str] = {
    # Character types
    "char": "int8",
    "signed char": "int8",
    "unsigned char": "byte",

    # Short
    "short": "int16",
    "unsigned short": "uint16",
    "short int": "int16",
    "unsigned short int": "uint16",
    "signed short int": "int16",

    # Int
    "int": "int32",
    "unsigned int": "uint32",
    "signed int": "int32",

    # Long
    # NOTE: "unsigned long" -> int64 and "signed long" -> uint are intentional
    "long": "int64",
    "unsigned long": "int64",
    "signed long": "uint",
    "long int": "int64",
    "unsigned long int": "uint64",
    "signed long int": "int64",

    # Long long
    "long long": "int64",
    "unsigned long long": "uint64",
    "signed long long": "int64",

    # Size
    "size_t": "uint64",

    # Floating point
    "float": "float32",
    "double": "float64",
    "complex float": "complex64",
    "complex double": "complex128",
    "_Complex float": "complex64",
    "_Complex double": "complex128",

    # Boolean
    "_Bool": "bool",

    # Void
    "void": "unsafe.Pointer",
}

# =============================================================================
# Fixed-Width Integer Types (stdint.h)
# =============================================================================

FIXED_WIDTH_TYPES: dict[str, str] = {
    # Signed
    "int8_t": "int8",
    "int16_t": "int16",
    "int32_t": "int32",
    "int64_t": "int64",

    # Unsigned
    "uint8_t": "uint8",
    "uint16_t": "uint16",
    "uint32_t": "uint32",
    "uint64_t": "uint64",
}

# =============================================================================
# Pointer Types
# =============================================================================

POINTER_TYPES: dict[str, str] = {
    VOID_POINTER: "*byte",
}


class TypeRegistry:
    """Central registry for C to Go primitive type mappings."""

    def lookup(self, c_type: str) -> Optional[TypeInfo]:
        """
        Look up type information for a normalized C type name.

        Args:
            c_type: The C type name (e.g., "int", "uint32_t", "void*")

        Returns:
            TypeInfo if found, None otherwise
        """
        if c_type in BUILTIN_TYPES:
            return TypeInfo(c_type, BUILTIN_TYPES[c_type], TypeKind.BUILTIN)

        if c_type in FIXED_WIDTH_TYPES:
            return TypeInfo(c_type, FIXED_WIDTH_TYPES[c_type], TypeKind.FIXED_WIDTH)

        if c_type in POINTER_TYPES:
            return TypeInfo(c_type, POINTER_TYPES[c_type], TypeKind.POINTER)

        return None

    def is_known_type(self, c_type: str) -> bool:
        """Check if a type is recognized."""
        return self.lookup(c_type) is not None

    def known_types(self) -> list[str]:
        """All C spellings the registry resolves."""
        return [*BUILTIN_TYPES, *FIXED_WIDTH_TYPES, *POINTER_TYPES]
