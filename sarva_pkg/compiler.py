"""Compile relation sides into plain real-valued Python functions.

``compile_relation("x^2", "4")`` builds ``f(x) = x**2 - 4`` and its
symbolic derivative with SymPy, then lambdifies both against the ``math``
module. The resulting callables go through :func:`as_scalar_function`, so
the numeric engine only ever sees floats: any evaluation failure or
non-real result comes back as ``nan``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

import sympy as sp

from .config import DEFAULT_VARIABLE, VAR_NAME_RE
from .logging_config import get_logger
from .parser import parse_preprocessed
from .types import ExpressionCompileError, ScalarFunction

logger = get_logger("compiler")

_EVALUATION_ERRORS = (
    ZeroDivisionError,
    ValueError,
    OverflowError,
    TypeError,
    ArithmeticError,
)


def as_scalar_function(func: Callable[[float], Any]) -> ScalarFunction:
    """Wrap ``func`` so it always returns a float.

    Exceptions raised while evaluating, complex results with a non-zero
    imaginary part, and values that cannot be converted to float all
    become ``nan``.
    """

    def evaluate(x: float) -> float:
        try:
            value = func(x)
        except _EVALUATION_ERRORS:
            return math.nan
        if isinstance(value, complex):
            if value.imag != 0:
                return math.nan
            value = value.real
        try:
            return float(value)
        except (TypeError, ValueError, OverflowError):
            return math.nan

    return evaluate


@dataclass(frozen=True)
class CompiledRelation:
    """Both sides of a relation folded into ``f = lhs - rhs``."""

    lhs: str
    rhs: str
    variable: sp.Symbol
    expr: sp.Expr
    derivative: sp.Expr
    f: ScalarFunction
    df: ScalarFunction

    @property
    def display(self) -> str:
        return f"{self.lhs} - ({self.rhs})"


def _lambdify(variable: sp.Symbol, expr: sp.Expr) -> ScalarFunction:
    try:
        func = sp.lambdify(variable, expr, modules="math")
    except (SyntaxError, TypeError, ValueError, NameError, KeyError) as e:
        raise ExpressionCompileError(f"Could not compile '{expr}': {e}") from e
    return as_scalar_function(func)


def compile_relation(lhs: str, rhs: str, variable: str = DEFAULT_VARIABLE) -> CompiledRelation:
    """Compile ``lhs - rhs`` and its derivative with respect to ``variable``.

    Args:
        lhs: Preprocessed left-hand side
        rhs: Preprocessed right-hand side
        variable: Name of the unknown (default "x")

    Returns:
        CompiledRelation with the symbolic forms and both scalar functions

    Raises:
        ExpressionCompileError: If either side fails to parse, mentions a
            symbol other than ``variable``, or cannot be lambdified
    """
    if not VAR_NAME_RE.match(variable):
        raise ExpressionCompileError(f"Invalid variable name '{variable}'", "INVALID_VARIABLE")
    var_sym = sp.Symbol(variable, real=True)

    lhs_expr = parse_preprocessed(lhs, variable)
    rhs_expr = parse_preprocessed(rhs, variable)
    expr = sp.Add(lhs_expr, sp.Mul(sp.S.NegativeOne, rhs_expr, evaluate=False), evaluate=False)

    foreign = sorted(str(s) for s in expr.free_symbols if s != var_sym)
    if foreign:
        raise ExpressionCompileError(
            f"Unknown symbol(s) {', '.join(foreign)}: only '{variable}' may appear in the expression",
            "UNKNOWN_SYMBOL",
        )

    try:
        derivative = sp.diff(expr, var_sym)
    except (TypeError, ValueError, NotImplementedError) as e:
        raise ExpressionCompileError(f"Could not differentiate '{expr}': {e}") from e
    if derivative.has(sp.Derivative):
        # No closed form (e.g. floor); Newton seeds on it are abandoned
        logger.debug("Derivative of %s has no closed form", expr)
        derivative = derivative.replace(lambda e: isinstance(e, sp.Derivative), lambda e: sp.nan)

    logger.debug("Compiled f(%s) = %s, f'(%s) = %s", variable, expr, variable, derivative)
    return CompiledRelation(
        lhs=lhs,
        rhs=rhs,
        variable=var_sym,
        expr=expr,
        derivative=derivative,
        f=_lambdify(var_sym, expr),
        df=_lambdify(var_sym, derivative),
    )
