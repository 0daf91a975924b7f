"""
Go source generators.
"""

from .base import EmittedNames, Generator, GeneratedFile
from .godefs import GodefsGenerator
from .constants import ConstantsGenerator

__all__ = [
    "EmittedNames",
    "Generator",
    "GeneratedFile",
    "GodefsGenerator",
    "ConstantsGenerator",
]
