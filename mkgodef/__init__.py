"""
mkgodef

Generates input files for cgo -godefs from C headers, and fixes up the
Go source cgo produces from them.
"""

__version__ = "0.1.0"
__author__ = "mkgodef authors"

from .config import MkgodefConfig

__all__ = ["MkgodefConfig", "__version__"]
