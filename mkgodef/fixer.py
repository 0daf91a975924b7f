"""
Post-processing of Go sources produced by cgo -godefs.

Repairs known artifacts of the generated text and reformats it with gofmt.
Works on source text only; it never sees the declaration tree.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from typing import Callable, Optional

from .naming import DIGIT_ESCAPE

logger = logging.getLogger(__name__)

# Go blank identifier replacing padding fields
DISCARD = "_"

# Struct fields whose name starts with a digit
_RE_START_DIGIT = re.compile(r"(?m)^(\t+)(\d+([\t\w_]+)?)")

# Padding fields inserted by cgo
_RE_PADDING_FIELDS = re.compile(r"Pad_cgo_\d+")

# Padding, hidden or unused fields
_RE_PADDING = re.compile(r"\bPadding\b")

_VOID_TYPE = "_Ctype_void"
_VOID_REPLACEMENT = "uintptr"

Formatter = Callable[[str], str]


class GoFormatError(RuntimeError):
    """The text is not valid Go source, or gofmt could not run."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class GoFormatter:
    """Formats Go source text with gofmt."""

    def __init__(self, gofmt: str = "gofmt"):
        self.gofmt = gofmt

    def check_requirements(self) -> list[str]:
        """Return the missing executables."""
        if not shutil.which(self.gofmt):
            return [self.gofmt]
        return []

    def format(self, src: str) -> str:
        """
        Format Go source.

        Raises:
            GoFormatError: gofmt is missing or rejects the source
        """
        missing = self.check_requirements()
        if missing:
            raise GoFormatError(f"{', '.join(missing)} not found in PATH", src)

        result = subprocess.run(
            [self.gofmt],
            input=src,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            raise GoFormatError(f"format source: {result.stderr.strip()}", src)

        return result.stdout

    __call__ = format


def fix_source(src: str, cwd: Optional[str] = None) -> str:
    """
    Rewrite known cgo -godefs artifacts.

    - struct fields starting with a digit get the X_ prefix
    - Pad_cgo_N and Padding fields become the blank identifier
    - _Ctype_void becomes uintptr
    - the working directory prefix is removed from paths

    Args:
        src: Generated Go source
        cwd: Directory prefix to strip, the working directory by default
    """
    out = _RE_START_DIGIT.sub(rf"\g<1>{DIGIT_ESCAPE}\g<2>", src)
    out = _RE_PADDING_FIELDS.sub(DISCARD, out)
    out = _RE_PADDING.sub(DISCARD, out)
    out = out.replace(_VOID_TYPE, _VOID_REPLACEMENT)

    if cwd is None:
        cwd = os.getcwd()
    out = out.replace(cwd + os.sep, "")

    return out


def fix(src: str, formatter: Formatter, cwd: Optional[str] = None) -> str:
    """
    Fix and reformat generated Go source.

    Raises:
        GoFormatError: the fixed source does not format; nothing is returned
    """
    fixed = fix_source(src, cwd)
    logger.debug("Fixed source, %d -> %d bytes", len(src), len(fixed))
    return formatter(fixed)
