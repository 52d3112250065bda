"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Expression preprocessing (symbol conversion, exponent handling, etc.)
- Splitting relations into ``lhs``, operator and ``rhs``
- SymPy expression parsing with security validation
- Result formatting (roots, interval boundaries, fractions, superscripts)
- Balancing checks for parentheses/brackets
"""

from __future__ import annotations

import math
import re
from fractions import Fraction
from functools import lru_cache
from tokenize import TokenError
from typing import Any, Iterable

import sympy as sp
from sympy import parse_expr

from . import config
from .config import (
    ALLOWED_SYMPY_NAMES,
    BOUNDARY_DECIMALS,
    CACHE_SIZE_PARSE,
    DIGIT_LETTERS_REGEX,
    FRACTION_MAX_DENOMINATOR,
    INTEGER_SNAP_TOLERANCE,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_NODES,
    MAX_INPUT_LENGTH,
    RELATIONAL_TOKEN_REGEX,
    SQRT_SNAP_TOLERANCE,
    SQRT_UNICODE_BARE_REGEX,
    SQRT_UNICODE_REGEX,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .types import ExpressionCompileError, Interval, MalformedInputError, ValidationError

logger = get_logger("parser")


def superscriptify(input_str: str) -> str:
    """Convert numeric string to Unicode superscript characters.

    Args:
        input_str: Input string with digits and '-' (e.g., "123", "-5")

    Returns:
        String with superscript Unicode characters (e.g., "¹²³", "⁻⁵")
    """
    mapping = {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "-": "⁻",
        "n": "ⁿ",
    }
    return "".join(mapping.get(char, char) for char in input_str)


def format_superscript(expr_str: str) -> str:
    """Replace Python power notation (**) with Unicode superscripts.

    Args:
        expr_str: Expression string (e.g., "x**2", "x**-3")

    Returns:
        String with superscripts (e.g., "x²", "x⁻³")
    """
    return re.sub(r"\*\*(\-?\d+)", lambda m: superscriptify(m.group(1)), expr_str)


def prettify_expr(expr_str: str) -> str:
    """Convert expression string to more readable format.

    Replaces 'sqrt(' with '√', powers with superscripts and '*' with '·'.
    """
    result = re.sub(r"sqrt\(([^()]+)\)", r"√(\1)", expr_str)
    result = format_superscript(result)
    result = result.replace("*", "·")
    return result


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a numeric value with specified precision.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    try:
        if precision is None:
            precision = config.OUTPUT_PRECISION
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        # Fallback for non-numeric or invalid values
        return str(val)


def format_root(value: float, decimals: int | None = None) -> str:
    """Fixed-precision decimal used for reported roots."""
    if decimals is None:
        decimals = config.ROOT_DECIMALS
    return f"{value:.{decimals}f}"


def to_fraction(value: float, max_denominator: int = FRACTION_MAX_DENOMINATOR) -> str:
    """Reduced-fraction approximation of a float (e.g. 0.5 -> "1/2").

    Falls back to a fixed-precision decimal for values that have no
    fraction form (infinities, nan).
    """
    try:
        frac = Fraction(value).limit_denominator(max_denominator)
    except (ValueError, OverflowError, TypeError):
        return format_root(value)
    if frac.denominator == 1:
        return str(frac.numerator)
    return f"{frac.numerator}/{frac.denominator}"


def format_boundary(value: float, decimals: int = BOUNDARY_DECIMALS) -> str:
    """Format an interval boundary in simplest radical form when possible.

    Integers within 1e-6 print as integers, values whose square is within
    1e-3 of an integer n print as √n, everything else with 3 decimals.
    """
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    nearest = round(value)
    if abs(value - nearest) < INTEGER_SNAP_TOLERANCE:
        return str(int(nearest))
    square = value * value
    n = round(square)
    if n >= 2 and abs(square - n) < SQRT_SNAP_TOLERANCE:
        return f"-√{n}" if value < 0 else f"√{n}"
    return f"{value:.{decimals}f}"


def format_interval(interval: Interval) -> str:
    """Render an interval with open brackets, e.g. "(-∞, 2)"."""
    return f"({format_boundary(interval.lo)}, {format_boundary(interval.hi)})"


def format_intervals(intervals: Iterable[Interval]) -> str:
    """Render a union of intervals, or "∅" when there are none."""
    rendered = [format_interval(iv) for iv in intervals]
    if not rendered:
        return "∅"
    return " ∪ ".join(rendered)


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: list[tuple[str, int]] = []  # (char, position)
    for i, char in enumerate(input_str):
        if char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, pos = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
    "memoryview",
    "bytes",
    "bytearray",
    ";",
)

_SUPERSCRIPT_DIGITS = {
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁻": "-",
}
_SUPERSCRIPT_RUN = re.compile(f"([{''.join(_SUPERSCRIPT_DIGITS)}]+)")


def preprocess(input_str: str) -> str:
    """Preprocess input string for parsing.

    Applies transformations:
    - Validates input length and forbidden tokens
    - Standardizes mathematical symbols (unicode variants to ASCII)
    - Converts exponents (^ to **, superscripts to **)
    - Converts Unicode square root (√) to sqrt(
    - Inserts implicit multiplication (2x -> 2*x)
    - Validates balanced parentheses/brackets

    Args:
        input_str: Raw input string from user

    Returns:
        Preprocessed and sanitized string ready for SymPy parsing

    Raises:
        ValidationError: If input is empty, too long, contains forbidden tokens,
                        or has unbalanced parentheses/brackets
    """
    input_str = input_str.strip() if input_str else ""
    if not input_str:
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    if len(input_str) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )

    lowered = input_str.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning(
                "Blocked input containing forbidden token %r (length %d)",
                tok,
                len(input_str),
            )
            raise ValidationError(
                f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN"
            )

    processed_str = input_str.replace("−", "-").replace("–", "-")
    processed_str = processed_str.replace("π", "pi")
    processed_str = processed_str.replace("×", "*").replace("·", "*").replace("÷", "/")
    processed_str = processed_str.replace("≤", "<=").replace("≥", ">=")
    # Standardize inequality variations
    processed_str = processed_str.replace("=>", ">=")
    processed_str = processed_str.replace("=<", "<=")

    processed_str = processed_str.replace("^", "**")
    processed_str = _SUPERSCRIPT_RUN.sub(
        lambda m: "**" + "".join(_SUPERSCRIPT_DIGITS[c] for c in m.group(1)),
        processed_str,
    )
    processed_str = SQRT_UNICODE_REGEX.sub("sqrt(", processed_str)
    processed_str = SQRT_UNICODE_BARE_REGEX.sub(r"sqrt(\1)", processed_str)
    processed_str = DIGIT_LETTERS_REGEX.sub(r"\1*\2", processed_str)
    processed_str = re.sub(r"\s+", " ", processed_str).strip()

    balanced, error_pos = is_balanced(processed_str)
    if not balanced:
        hint = ""
        if error_pos is not None:
            start = max(0, error_pos - 10)
            end = min(len(processed_str), error_pos + 10)
            hint = f" at position {error_pos}: ...{processed_str[start:end]}..."
        raise ValidationError(
            f"Mismatched or unbalanced parentheses/brackets{hint}",
            "UNBALANCED_PARENS",
        )
    return processed_str


def split_relation(
    input_str: str, allowed_ops: Iterable[str]
) -> tuple[str, str, str]:
    """Split a preprocessed relation into (lhs, operator, rhs).

    Exactly one relational operator must be present and it must be one of
    ``allowed_ops``; both sides must be non-empty.

    Raises:
        MalformedInputError: If the text is not of the form ``lhs op rhs``
    """
    allowed = tuple(allowed_ops)
    expected = " or ".join(repr(op) for op in allowed)
    tokens = list(RELATIONAL_TOKEN_REGEX.finditer(input_str))
    if not tokens:
        raise MalformedInputError(
            f"Expected a relation of the form 'lhs {allowed[0]} rhs' using {expected}."
        )
    if len(tokens) > 1:
        raise MalformedInputError(
            "Invalid format: only one relational operator is allowed "
            f"(found {', '.join(t.group(0) for t in tokens)})."
        )
    token = tokens[0]
    op = token.group(0)
    if op not in allowed:
        raise MalformedInputError(f"Invalid operator '{op}': expected {expected}.")
    lhs = input_str[: token.start()].strip()
    rhs = input_str[token.end() :].strip()
    if not lhs or not rhs:
        raise MalformedInputError(
            f"Invalid format: both sides of '{op}' must contain an expression."
        )
    return lhs, op, rhs


def detect_operator(input_str: str) -> str | None:
    """Return the first relational operator in the text, if any."""
    match = RELATIONAL_TOKEN_REGEX.search(input_str)
    return match.group(0) if match else None


def _validate_expression_tree(expr: Any, depth: int = 0, node_count: list[int] | None = None) -> None:
    """Validate expression tree structure - reject dangerous or oversized trees."""
    if node_count is None:
        node_count = [0]
    node_count[0] += 1
    if node_count[0] > MAX_EXPRESSION_NODES:
        raise ValidationError(
            f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)", "TOO_COMPLEX"
        )
    if depth > MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
        )
    if isinstance(expr, (sp.Symbol, sp.Number, sp.NumberSymbol)):
        return
    if isinstance(expr, sp.core.function.AppliedUndef):
        raise ValidationError(
            f"Unknown function '{expr.func.__name__}'", "FORBIDDEN_FUNCTION"
        )
    if isinstance(expr, sp.Function):
        func_name = getattr(expr.func, "__name__", str(expr.func))
        allowed_funcs = {
            getattr(fn, "__name__", name) for name, fn in ALLOWED_SYMPY_NAMES.items()
        }
        if func_name not in allowed_funcs:
            logger.warning("Blocked forbidden function %r", func_name)
            raise ValidationError(
                f"Function '{func_name}' not allowed", "FORBIDDEN_FUNCTION"
            )
    if not isinstance(expr, sp.Basic):
        raise ValidationError(
            f"Expression type '{type(expr).__name__}' not allowed", "FORBIDDEN_TYPE"
        )
    if isinstance(expr, (sp.logic.boolalg.Boolean, sp.core.relational.Relational)):
        raise ValidationError(
            "Relational or logical operators are not allowed inside an expression",
            "FORBIDDEN_TYPE",
        )
    for arg in expr.args:
        _validate_expression_tree(arg, depth + 1, node_count)


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_preprocessed(expr_str: str, variable: str | None = None) -> sp.Expr:
    """Parse and validate one preprocessed side of a relation.

    The tree is built unevaluated so that removable singularities such as
    ``(x-1)/(x-1)`` survive into the compiled function. When ``variable``
    is given it is parsed as a real symbol.

    Raises:
        ExpressionCompileError: If SymPy cannot parse the text or the
            resulting tree is not an allowed real-valued expression
    """
    local_dict = dict(ALLOWED_SYMPY_NAMES)
    if variable:
        local_dict[variable] = sp.Symbol(variable, real=True)
    try:
        expr = parse_expr(
            expr_str,
            local_dict=local_dict,
            transformations=TRANSFORMATIONS,
            evaluate=False,
        )
    except (SyntaxError, TokenError, TypeError, ValueError, AttributeError, sp.SympifyError) as e:
        logger.debug("Failed to parse %r: %s", expr_str, e)
        raise ExpressionCompileError(f"Could not parse expression '{expr_str}': {e}") from e
    try:
        _validate_expression_tree(expr)
    except ValidationError as e:
        raise ExpressionCompileError(f"Invalid expression '{expr_str}': {e}") from e
    if not isinstance(expr, sp.Expr):
        raise ExpressionCompileError(f"'{expr_str}' is not a numeric expression")
    return expr
