"""Centralized configuration for Sarva.

This module defines:
- Newton-Raphson seeding and convergence settings
- Sampling window and resolution for critical point detection
- Tolerances used for deduplication and interval merging
- Input validation limits (length, depth, node count)
- Allowed SymPy functions and parse transformations
- Regex patterns for preprocessing

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with SARVA_)
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("sarva")
except Exception:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Root finder (multi-seed Newton-Raphson)
SEED_MIN = float(os.getenv("SARVA_SEED_MIN", "-10"))
SEED_MAX = float(os.getenv("SARVA_SEED_MAX", "10"))
SEED_STEP = float(os.getenv("SARVA_SEED_STEP", "0.5"))
NEWTON_MAX_ITERATIONS = int(os.getenv("SARVA_NEWTON_MAX_ITERATIONS", "50"))
NEWTON_TOLERANCE = float(
    os.getenv("SARVA_NEWTON_TOLERANCE", "1e-7")
)  # Convergence threshold on step size
FLAT_DERIVATIVE_TOLERANCE = float(
    os.getenv("SARVA_FLAT_DERIVATIVE_TOLERANCE", "1e-12")
)  # Below this |f'(x)| the seed is abandoned
ROOT_DEDUP_TOLERANCE = float(
    os.getenv("SARVA_ROOT_DEDUP_TOLERANCE", "1e-4")
)  # Absolute distance under which two roots are the same root
MAX_ROOTS = int(os.getenv("SARVA_MAX_ROOTS", "10"))

# Critical point detection (sampling + bisection)
SCAN_DOMAIN_MIN = float(os.getenv("SARVA_SCAN_DOMAIN_MIN", "-50"))
SCAN_DOMAIN_MAX = float(os.getenv("SARVA_SCAN_DOMAIN_MAX", "50"))
SCAN_SAMPLES = int(os.getenv("SARVA_SCAN_SAMPLES", "1000"))
BISECTION_ITERATIONS = int(os.getenv("SARVA_BISECTION_ITERATIONS", "20"))
BOUNDARY_TOLERANCE = float(
    os.getenv("SARVA_BOUNDARY_TOLERANCE", "1e-6")
)  # Boundaries closer than this are one boundary; also the merge tolerance

# Output formatting
OUTPUT_PRECISION = int(os.getenv("SARVA_OUTPUT_PRECISION", "6"))
ROOT_DECIMALS = int(os.getenv("SARVA_ROOT_DECIMALS", "6"))
BOUNDARY_DECIMALS = int(os.getenv("SARVA_BOUNDARY_DECIMALS", "3"))
INTEGER_SNAP_TOLERANCE = 1e-6
SQRT_SNAP_TOLERANCE = 1e-3
FRACTION_MAX_DENOMINATOR = int(os.getenv("SARVA_FRACTION_MAX_DENOMINATOR", "1000000"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SARVA_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("SARVA_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth
MAX_EXPRESSION_NODES = int(
    os.getenv("SARVA_MAX_EXPRESSION_NODES", "5000")
)  # total nodes

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("SARVA_CACHE_SIZE_PARSE", "1024"))

# Plotting
PLOT_POINTS = int(os.getenv("SARVA_PLOT_POINTS", "800"))

DEFAULT_VARIABLE = os.getenv("SARVA_DEFAULT_VARIABLE", "x")

EQUATION_OPERATOR = "="
INEQUALITY_OPERATORS = ("<=", ">=", "<", ">")

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "e": sp.E,
    "sqrt": sp.sqrt,
    "cbrt": sp.cbrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "Abs": sp.Abs,
    "abs": sp.Abs,  # lowercase alias for convenience
    "floor": sp.floor,
    "ceiling": sp.ceiling,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

RELATIONAL_TOKEN_REGEX = re.compile(r"<=|>=|==|!=|<|>|=")

SQRT_UNICODE_REGEX = re.compile(r"√\s*\(")
SQRT_UNICODE_BARE_REGEX = re.compile(r"√\s*([A-Za-z0-9_.]+)")
# "2x" -> "2*x" but leave "1e-3" and identifiers such as "log10" alone
DIGIT_LETTERS_REGEX = re.compile(r"\b(\d+(?:\.\d+)?)\s*(?![eE][+-]?\d)([A-Za-z(])")
