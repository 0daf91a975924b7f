"""
Type system for C to Go type mapping.
"""

from .registry import TypeRegistry, BUILTIN_TYPES, FIXED_WIDTH_TYPES
from .go_mapper import GoTypeMapper

__all__ = ["TypeRegistry", "GoTypeMapper", "BUILTIN_TYPES", "FIXED_WIDTH_TYPES"]
