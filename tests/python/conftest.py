"""
Pytest configuration and shared fixtures for mkgodef tests.

Most tests run on in-memory declaration trees built from FakeDecl, so
they need neither libclang nor gofmt.
"""

import shutil
import sys
from pathlib import Path
from typing import Iterator, Optional

import pytest

# Add the project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from mkgodef.config import MkgodefConfig
from mkgodef.parser.decl import Decl, DeclKind

# Try to import libclang - if it fails, skip tests that require it
try:
    import clang.cindex
    clang.cindex.Index.create()
    HAS_CLANG = True
except Exception as e:
    HAS_CLANG = False
    CLANG_IMPORT_ERROR = str(e)


HAS_GOFMT = shutil.which("gofmt") is not None


# =============================================================================
# Fake declaration tree
# =============================================================================

class FakeDecl(Decl):
    """In-memory Decl; equality is identity."""

    def __init__(
        self,
        kind: DeclKind,
        spelling: str = "",
        display_name: Optional[str] = None,
        file_name: str = "include/foo.h",
        children: Optional[list["FakeDecl"]] = None,
        arguments: Optional[list["FakeDecl"]] = None,
        type_spelling: str = "",
        result_type_spelling: str = "",
        kind_spelling: Optional[str] = None,
    ):
        self._kind = kind
        self._spelling = spelling
        self._display_name = spelling if display_name is None else display_name
        self._file_name = file_name
        self._children = list(children or [])
        self._arguments = list(arguments or [])
        self._type_spelling = type_spelling
        self._result_type_spelling = result_type_spelling
        self._kind_spelling = kind_spelling

    def __repr__(self) -> str:
        return f"FakeDecl({self.kind_spelling}, {self._spelling!r})"

    @property
    def kind(self) -> DeclKind:
        return self._kind

    @property
    def kind_spelling(self) -> str:
        if self._kind_spelling is not None:
            return self._kind_spelling
        return self._kind.spelling

    @property
    def spelling(self) -> str:
        return self._spelling

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def file_name(self) -> str:
        return self._file_name

    def children(self) -> Iterator[Decl]:
        return iter(self._children)

    def arguments(self) -> list[Decl]:
        return list(self._arguments)

    @property
    def type_spelling(self) -> str:
        return self._type_spelling

    @property
    def result_type_spelling(self) -> str:
        return self._result_type_spelling


def tu(*children: FakeDecl) -> FakeDecl:
    """Translation unit root over children."""
    return FakeDecl(DeclKind.TRANSLATION_UNIT, "unit", file_name="", children=list(children))


def function(name: str, result: str, *params: tuple[str, str], file_name: str = "include/foo.h") -> FakeDecl:
    """Function declaration; params are (name, type) pairs."""
    args = [
        FakeDecl(DeclKind.PARM_DECL, p_name, type_spelling=p_type, file_name=file_name)
        for p_name, p_type in params
    ]
    return FakeDecl(
        DeclKind.FUNCTION_DECL,
        name,
        display_name=f"{name}()",
        file_name=file_name,
        children=list(args),
        arguments=args,
        result_type_spelling=result,
    )


def enum(name: str, *constants: str, file_name: str = "include/foo.h") -> FakeDecl:
    """Enum declaration with its constants as children."""
    return FakeDecl(
        DeclKind.ENUM_DECL,
        name,
        file_name=file_name,
        children=[
            FakeDecl(DeclKind.ENUM_CONSTANT_DECL, c, file_name=file_name)
            for c in constants
        ],
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def requires_clang():
    """Skip test if libclang is not available."""
    if not HAS_CLANG:
        pytest.skip(f"libclang not available: {CLANG_IMPORT_ERROR}")


@pytest.fixture(scope="session")
def requires_gofmt():
    """Skip test if gofmt is not in PATH."""
    if not HAS_GOFMT:
        pytest.skip("gofmt not available")


@pytest.fixture
def fake_decl():
    """FakeDecl constructor."""
    return FakeDecl


@pytest.fixture
def make_tu():
    """Translation unit builder."""
    return tu


@pytest.fixture
def make_function():
    """Function declaration builder."""
    return function


@pytest.fixture
def make_enum():
    """Enum declaration builder."""
    return enum


@pytest.fixture
def config(tmp_path):
    """Configuration for package foo and header include/foo.h, stdout output."""
    return MkgodefConfig(
        project_root=tmp_path,
        package="foo",
        headers=["include/foo.h"],
    )


@pytest.fixture
def identity_formatter():
    """Formatter that returns its input unchanged."""
    return lambda src: src


@pytest.fixture
def foo_header(tmp_path):
    """A small C header on disk, include/foo.h under tmp_path."""
    include = tmp_path / "include"
    include.mkdir()
    header = include / "foo.h"
    header.write_text(
        "#ifndef FOO_H\n"
        "#define FOO_H\n"
        "\n"
        "#define FOO_VERSION 3\n"
        "#define _FOO_PRIVATE 1\n"
        "\n"
        "enum color { RED, GREEN, BLUE };\n"
        "\n"
        "struct my_point { int x; int y; };\n"
        "\n"
        "typedef unsigned int foo_size;\n"
        "\n"
        "int add(int a, int b);\n"
        "\n"
        "#endif\n"
    )
    return header
