"""Main entry point for running sarva_pkg as a module.

This allows running Sarva with:
    python -m sarva_pkg
    python -m sarva_pkg -e "x^2 = 4"
    python -m sarva_pkg -e "x - 1 > 0" --format json

This is equivalent to running:
    python -m sarva_pkg.cli
    python sarva.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
