"""
cgo -godefs input generator.

Turns classified declaration buckets into a Go source unit for
``go tool cgo -godefs``. Output is deterministic: every bucket is sorted
before emission, and categories always come in the same order (enums,
types, functions).
"""

from __future__ import annotations

import logging
from typing import Optional

from .base import EmittedNames, Generator, GeneratedFile
from ..classifier import DeclBuckets
from ..config import MkgodefConfig, Mode
from ..naming import export, lower_camel_case, upper_camel_case
from ..parser.decl import Decl, DeclKind
from ..types import GoTypeMapper

logger = logging.getLogger(__name__)


# Declaration templates of the type block, formatted with (go_name, c_name)
TYPE_TEMPLATES: dict[DeclKind, str] = {
    DeclKind.STRUCT_DECL: "type {0} C.struct_{1}\n\n",
    DeclKind.UNION_DECL: "type {0} C.union_{1}\n\n",
    DeclKind.TYPEDEF_DECL: "type {0} C.{1}\n\n",
    DeclKind.VAR_DECL: "var {0} = C.{1}\n\n",
    DeclKind.MACRO_EXPANSION: "const {0} = C.{1}\n\n",
}


def _c_name(decl: Decl) -> str:
    name = decl.display_name
    if name.endswith("\n"):
        name = name[:-1]
    return name


def _arg_name(arg: Decl, index: int, transform: bool) -> str:
    name = arg.display_name
    if transform:
        name = lower_camel_case(name).strip()
    return name or f"arg{index}"


def go_type_name(kind: DeclKind, c_name: str) -> str:
    """Go name of a declaration of the type block."""
    if kind is DeclKind.MACRO_EXPANSION:
        return export(c_name)

    go_name = upper_camel_case(c_name)
    if kind is DeclKind.VAR_DECL and go_name.endswith("T"):
        go_name = go_name[:-1]
    return go_name


class GodefsGenerator(Generator):
    """
    Generator for the cgo -godefs input file.

    Enum, type and transformed function names share one EmittedNames, so
    no two declarations of a run get the same Go name. Raw function
    signatures keep C names and dedup on their own.
    """

    def __init__(self, config: MkgodefConfig, mapper: Optional[GoTypeMapper] = None):
        super().__init__(config)
        self.mapper = mapper or GoTypeMapper()

    def generate(self, buckets: DeclBuckets) -> GeneratedFile:
        """Generate the Go source unit from classified declarations."""
        mode = self.config.mode
        emitted = EmittedNames()

        parts = [self._gen_header(mode)]

        if mode & Mode.ENUM:
            parts.append(self._gen_enums(buckets.enums, emitted))

        if mode & Mode.TYPE:
            parts.append(self._gen_types(buckets.types, emitted))

        if mode & Mode.FUNC:
            parts.append(self._gen_functions(buckets.functions, emitted))

        if mode & Mode.RAWFUNC:
            parts.append(self._gen_raw_functions(buckets.functions, EmittedNames()))

        logger.info("Emitted %d Go declarations", len(emitted))

        return GeneratedFile(
            content="".join(parts),
            path=self.config.output_abs,
            diagnostics=self._gen_diagnostics(buckets.unrecognized),
        )

    def _gen_header(self, mode: Mode) -> str:
        """Generate banner, build constraints, package clause and preamble."""
        return self.render(
            "godefs.go.j2",
            package=self.config.package,
            godefs_map=sorted(self.config.godefs_map.items()),
            preamble=bool(mode & (Mode.ENUM | Mode.TYPE)),
            headers=self.config.headers,
            sources=self.config.sources,
        )

    def _gen_enums(self, enums: dict[Decl, list[Decl]], emitted: EmittedNames) -> str:
        """Generate enum types and their constant blocks."""
        out = []

        for parent in sorted(enums, key=_c_name):
            constants = sorted(enums[parent], key=lambda d: d.kind_spelling)

            parent_name = _c_name(parent)
            if parent_name:
                type_name = upper_camel_case(parent_name)
                if not self._claim(emitted, type_name, parent_name):
                    continue
                out.append(f"type {type_name} C.enum_{parent_name}\n\n")
                line = "\t{0} %s = C.{0}\n" % type_name
            else:
                # Anonymous enum: untyped constants
                line = "\t{0} = C.{0}\n"

            out.append("const (\n")
            for constant in constants:
                name = _c_name(constant)
                if not self._claim(emitted, name, name):
                    continue
                out.append(line.format(name))
            out.append(")\n\n")

        return "".join(out)

    def _gen_types(self, types: dict[DeclKind, list[Decl]], emitted: EmittedNames) -> str:
        """Generate struct, union, typedef, var and macro constant declarations."""
        out = []

        for kind in sorted(types, key=lambda k: k.spelling):
            template = TYPE_TEMPLATES.get(kind)
            if template is None:
                continue

            for decl in sorted(types[kind], key=_c_name):
                c_name = _c_name(decl)
                if not c_name:
                    continue

                go_name = go_type_name(kind, c_name)
                if not go_name:
                    logger.debug("skip %s: no Go name left", c_name)
                    continue
                if not self._claim(emitted, go_name, c_name):
                    continue

                out.append(template.format(go_name, c_name))

        return "".join(out)

    def _gen_functions(self, functions: dict[str, Decl], emitted: EmittedNames) -> str:
        """Generate //sys signatures with Go names and types."""
        out = []

        for c_name in sorted(functions):
            func = functions[c_name]
            go_name = upper_camel_case(func.spelling)
            if not self._claim(emitted, go_name, c_name):
                continue

            params = ", ".join(
                f"{_arg_name(arg, i, True)} {self.mapper.map_type(arg.type_spelling)}"
                for i, arg in enumerate(func.arguments())
            )
            result = self.mapper.map_type(func.result_type_spelling)

            out.append(f"//sys func {go_name}({params}) {result}\n")

        return "".join(out)

    def _gen_raw_functions(self, functions: dict[str, Decl], emitted: EmittedNames) -> str:
        """Generate //sys signatures with the C names and C types."""
        out = []

        for c_name in sorted(functions):
            func = functions[c_name]
            if not self._claim(emitted, c_name, c_name):
                continue

            params = ", ".join(
                f"{_arg_name(arg, i, False)} {arg.type_spelling}"
                for i, arg in enumerate(func.arguments())
            )

            out.append(f"//sys func {func.spelling}({params}) {func.result_type_spelling}\n")

        return "".join(out)

    def _gen_diagnostics(self, unrecognized: dict[str, list[Decl]]) -> str:
        """Describe the declarations of kinds no category handles."""
        out = []

        for kind in sorted(unrecognized):
            for decl in sorted(unrecognized[kind], key=_c_name):
                c_name = _c_name(decl)
                if not c_name:
                    continue
                out.append(
                    f"kind: {kind}, cName: {c_name}, goName: {upper_camel_case(c_name)}\n"
                )

        return "".join(out)
