"""
Base classes for Go source generators.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from ..config import MkgodefConfig

logger = logging.getLogger(__name__)


@dataclass
class GeneratedFile:
    """Represents a generated Go source unit."""
    content: str
    path: Optional[Path] = None  # None: standard output
    diagnostics: str = ""


class EmittedNames:
    """
    Go identifiers already claimed in one generator run.

    Every emitted declaration claims its name exactly once; a failed claim
    means the declaration is dropped.
    """

    def __init__(self) -> None:
        self._names: set[str] = set()

    def claim(self, name: str) -> bool:
        """Claim name; False if it was already claimed."""
        if name in self._names:
            return False
        self._names.add(name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))


class Generator(ABC):
    """
    Abstract base class for Go source generators.

    The file skeleton (banner, build constraints, package clause, cgo
    preamble) comes from Jinja2 templates; declarations are produced by
    the subclasses.
    """

    def __init__(self, config: MkgodefConfig):
        """
        Initialize the generator.

        Args:
            config: mkgodef configuration
        """
        self.config = config
        self._env: Optional[Environment] = None

    @property
    def env(self) -> Environment:
        """Lazy-load Jinja2 environment."""
        if self._env is None:
            self._env = self._create_jinja_env()
        return self._env

    def _create_jinja_env(self) -> Environment:
        """Create and configure Jinja2 environment."""
        try:
            loader = PackageLoader("mkgodef", "templates")
        except (ValueError, ImportError):
            # Fallback: try loading from file system
            templates_dir = Path(__file__).parent.parent / "templates"
            loader = FileSystemLoader(str(templates_dir))

        return Environment(
            loader=loader,
            autoescape=select_autoescape(default=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template: str, **context: Any) -> str:
        """Render a template from the templates directory."""
        return self.env.get_template(template).render(**context)

    @abstractmethod
    def generate(self, source: Any) -> GeneratedFile:
        """
        Generate a Go source unit.

        Args:
            source: Generator-specific input

        Returns:
            Generated file content
        """
        pass

    @staticmethod
    def _claim(names: EmittedNames, go_name: str, c_name: str) -> bool:
        """Claim go_name, logging the declaration dropped on a collision."""
        if names.claim(go_name):
            return True
        logger.debug("ignore duplicate %s (C name %s)", go_name, c_name)
        return False
