"""
CLI entry point for the mkgodef package.

Usage:
    python -m mkgodef <command> [options]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
