"""
Tests for C to Go type mapping.
"""

import pytest

from mkgodef.types import BUILTIN_TYPES, FIXED_WIDTH_TYPES, GoTypeMapper, TypeRegistry
from mkgodef.types.registry import VOID_POINTER, TypeKind


@pytest.fixture
def mapper():
    return GoTypeMapper()


class TestTypeRegistry:
    """Test the primitive type table."""

    def test_lookup_builtin(self):
        info = TypeRegistry().lookup("int")
        assert info.go_name == "int32"
        assert info.kind is TypeKind.BUILTIN

    def test_lookup_fixed_width(self):
        info = TypeRegistry().lookup("uint16_t")
        assert info.go_name == "uint16"
        assert info.kind is TypeKind.FIXED_WIDTH

    def test_lookup_void_pointer(self):
        info = TypeRegistry().lookup(VOID_POINTER)
        assert info.go_name == "*byte"
        assert info.kind is TypeKind.POINTER

    def test_unknown(self):
        registry = TypeRegistry()
        assert registry.lookup("my_type") is None
        assert not registry.is_known_type("my_type")

    def test_known_types(self):
        known = TypeRegistry().known_types()
        assert set(BUILTIN_TYPES) <= set(known)
        assert set(FIXED_WIDTH_TYPES) <= set(known)
        assert VOID_POINTER in known


class TestGoTypeMapper:
    """Test mapping of C type spellings."""

    @pytest.mark.parametrize("c_type,expected", [
        ("int", "int32"),
        ("unsigned int", "uint32"),
        ("char", "int8"),
        ("unsigned char", "byte"),
        ("long long", "int64"),
        ("unsigned long long", "uint64"),
        ("size_t", "uint64"),
        ("double", "float64"),
        ("float", "float32"),
        ("_Bool", "bool"),
        ("int64_t", "int64"),
        ("uint8_t", "uint8"),
    ])
    def test_primitives(self, mapper, c_type, expected):
        assert mapper.map_type(c_type) == expected

    def test_long_table_values(self, mapper):
        """Test the long variants map as the table has them."""
        assert mapper.map_type("signed long") == "uint"
        assert mapper.map_type("unsigned long") == "int64"
        assert mapper.map_type("long") == "int64"

    def test_const_stripped(self, mapper):
        """Test const is removed before the lookup."""
        assert mapper.map_type("const uint32_t") == "uint32"
        assert mapper.map_type("const char *") == "int8"

    def test_struct_and_enum_stripped(self, mapper):
        """Test tag keywords are removed and the name exported."""
        assert mapper.map_type("struct foo") == "Foo"
        assert mapper.map_type("enum color") == "Color"
        assert mapper.map_type("const struct foo *") == "Foo"

    def test_one_pointer_level(self, mapper):
        assert mapper.map_type("int *") == "int32"
        assert mapper.map_type("double *") == "float64"

    def test_void_pointer(self, mapper):
        """Test void* is the opaque pointer sentinel, with or without space."""
        assert mapper.map_type("void *") == "*byte"
        assert mapper.map_type("void*") == "*byte"
        assert mapper.map_type("const void *") == "*byte"

    def test_void_pointer_pointer(self, mapper):
        """Test stripping a pointer level can land on the sentinel."""
        assert mapper.map_type("void **") == "*byte"
        assert mapper.map_type("void**") == "*byte"
        assert mapper.map_type("const void **") == "*byte"

    def test_pointer_without_space(self, mapper):
        assert mapper.map_type("int*") == "int32"
        assert mapper.normalize("struct foo*") == "foo"

    def test_deep_pointer_falls_through(self, mapper):
        """Test only one level is stripped from non-void pointers."""
        assert mapper.map_type("char **") == "Char *"

    def test_bare_void(self, mapper):
        """Test bare void is not the pointer sentinel."""
        assert mapper.map_type("void") == "unsafe.Pointer"

    def test_unknown_exported(self, mapper):
        """Test unknown spellings become exported Go names."""
        assert mapper.map_type("my_type") == "My_type"
        assert mapper.map_type("_private_t") == "X_private_t"

    def test_normalize(self, mapper):
        assert mapper.normalize("const struct foo *") == "foo"
        assert mapper.normalize("void *") == VOID_POINTER
        assert mapper.normalize("int") == "int"


class TestTableTotality:
    """Test every table entry maps to one Go type, with or without const."""

    @pytest.mark.parametrize("c_type", sorted({**BUILTIN_TYPES, **FIXED_WIDTH_TYPES}))
    def test_const_maps_identically(self, mapper, c_type):
        go_type = mapper.map_type(c_type)
        assert go_type == {**BUILTIN_TYPES, **FIXED_WIDTH_TYPES}[c_type]
        assert mapper.map_type("const " + c_type) == go_type
