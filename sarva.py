#!/usr/bin/env python3
"""
Sarva - Numeric Equation and Inequality Solver

Thin wrapper that delegates all functionality to the sarva_pkg package.

Usage:
    python sarva.py                         # Interactive REPL
    python sarva.py -e "x^2 = 4"            # Solve an equation
    python sarva.py -e "x - 1 > 0"          # Solve an inequality
    python sarva.py --help                  # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Sarva.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from sarva_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import sarva_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
