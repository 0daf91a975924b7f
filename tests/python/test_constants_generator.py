"""
Tests for the macro constants generator.
"""

from pathlib import Path

import pytest

from mkgodef.fixer import GoFormatError
from mkgodef.generators import ConstantsGenerator, EmittedNames
from mkgodef.generators.constants import UNSAVED_FILENAME, include_dir, unsaved_include
from mkgodef.parser import DeclKind, ParsedUnit


@pytest.fixture
def foo_unit(fake_decl, make_tu, make_function):
    """Unit as parsed through the in-memory source including foo.h."""
    root = make_tu(
        fake_decl(DeclKind.MACRO_DEFINITION, "__STDC__", file_name=""),
        fake_decl(DeclKind.INCLUSION_DIRECTIVE, "foo.h", file_name=UNSAVED_FILENAME),
        fake_decl(DeclKind.MACRO_DEFINITION, "FOO_H"),
        fake_decl(DeclKind.MACRO_DEFINITION, "FOO_VERSION"),
        fake_decl(DeclKind.MACRO_DEFINITION, "_FOO_PRIVATE"),
        fake_decl(DeclKind.MACRO_DEFINITION, "foo_flag"),
        make_function("add", "int", ("a", "int"), ("b", "int")),
    )
    return ParsedUnit(header=Path("include/foo.h"), root=root, translation_unit=None)


class TestUnsavedSource:
    """Test the in-memory source wrapping a header."""

    def test_unsaved_include(self):
        name, contents = unsaved_include(Path("include/foo.h"))
        assert name == UNSAVED_FILENAME
        assert "#include <foo.h>" in contents

    def test_include_dir(self, tmp_path):
        assert include_dir(tmp_path / "foo.h") == tmp_path.resolve()


class TestCollect:
    """Test the top-level walk of one unit."""

    def test_constants(self, config, identity_formatter, foo_unit):
        generator = ConstantsGenerator(config, formatter=identity_formatter)
        section = generator.collect(foo_unit.header, foo_unit.root, EmittedNames())

        assert section.name == "foo.h"
        assert section.constants == [
            ("FOO_VERSION", "FOO_VERSION"),
            ("FOO_PRIVATE", "_FOO_PRIVATE"),
            ("Foo_flag", "foo_flag"),
        ]

    def test_include_guard_skipped(self, config, identity_formatter, foo_unit):
        generator = ConstantsGenerator(config, formatter=identity_formatter)
        section = generator.collect(foo_unit.header, foo_unit.root, EmittedNames())
        assert "FOO_H" not in [c_name for _, c_name in section.constants]

    def test_builtin_skipped(self, config, identity_formatter, foo_unit):
        generator = ConstantsGenerator(config, formatter=identity_formatter)
        section = generator.collect(foo_unit.header, foo_unit.root, EmittedNames())
        assert "__STDC__" not in [c_name for _, c_name in section.constants]

    def test_function_signatures(self, config, identity_formatter, foo_unit):
        generator = ConstantsGenerator(config, formatter=identity_formatter)
        section = generator.collect(foo_unit.header, foo_unit.root, EmittedNames())
        assert section.functions == ["int add(int a, int b)"]

    def test_duplicates_dropped(self, config, identity_formatter, fake_decl, make_tu):
        root = make_tu(
            fake_decl(DeclKind.MACRO_DEFINITION, "FOO_MAX"),
            fake_decl(DeclKind.MACRO_DEFINITION, "_FOO_MAX"),
        )
        generator = ConstantsGenerator(config, formatter=identity_formatter)
        section = generator.collect(Path("foo.h"), root, EmittedNames())
        assert section.constants == [("FOO_MAX", "FOO_MAX")]


class TestGenerate:
    """Test rendering and formatting of the whole unit."""

    def test_rendered(self, config, identity_formatter, foo_unit):
        result = ConstantsGenerator(config, formatter=identity_formatter).generate([foo_unit])
        content = result.content

        assert content.startswith("// Code generated by mkgodef; DO NOT EDIT.\n")
        assert "package foo\n" in content
        assert 'import "C"\n' in content
        assert (
            "// from foo.h.\n"
            "const (\n"
            "\tFOO_VERSION = C.FOO_VERSION\n"
            "\tFOO_PRIVATE = C._FOO_PRIVATE\n"
            "\tFoo_flag = C.foo_flag\n"
            ")\n"
        ) in content
        assert "// from foo.h.\n// int add(int a, int b)\n" in content

    def test_names_unique_across_headers(self, config, identity_formatter, fake_decl, make_tu):
        units = [
            ParsedUnit(
                header=Path(name),
                root=make_tu(fake_decl(DeclKind.MACRO_DEFINITION, "FOO_MAX", file_name=name)),
                translation_unit=None,
            )
            for name in ["include/foo.h", "include/bar.h"]
        ]
        content = ConstantsGenerator(config, formatter=identity_formatter).generate(units).content

        assert content.count("FOO_MAX = C.FOO_MAX") == 1
        assert "// from bar.h." not in content

    def test_formatter_applied(self, config, foo_unit):
        generator = ConstantsGenerator(config, formatter=lambda src: src.upper())
        assert "PACKAGE FOO" in generator.generate([foo_unit]).content

    def test_format_error_carries_raw_text(self, config, foo_unit):
        def formatter(src):
            raise GoFormatError("format source: bad")

        generator = ConstantsGenerator(config, formatter=formatter)
        with pytest.raises(GoFormatError) as exc_info:
            generator.generate([foo_unit])

        assert "\tFOO_VERSION = C.FOO_VERSION\n" in exc_info.value.source

    def test_default_formatter_uses_config(self, config):
        config.gofmt = "/opt/go/bin/gofmt"
        assert ConstantsGenerator(config).formatter.gofmt == "/opt/go/bin/gofmt"
