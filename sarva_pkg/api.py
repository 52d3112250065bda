"""Public API for Sarva - returns structured objects without side effects."""

from __future__ import annotations

from . import config
from .parser import detect_operator, preprocess
from .plotting import plot_relation
from .solver import solve_inequality as _solve_inequality
from .solver import solve_single_equation
from .types import InequalityResult, PlotResult, SolveResult, ValidationError


def solve_equation(
    equation: str, variable: str | None = None, max_roots: int | None = None
) -> SolveResult:
    """Solve a single-variable equation numerically.

    Args:
        equation: Equation string (e.g., "x^2 - 4 = 0")
        variable: Unknown to solve for (default: "x")
        max_roots: Cap on reported roots (default: 10)

    Returns:
        SolveResult with sorted roots and the derivation trail

    Example:
        >>> from sarva_pkg.api import solve_equation
        >>> result = solve_equation("x^2 - 4 = 0")
        >>> print(result.approx)
        ['-2.000000', '2.000000']
        >>> solve_equation("x^2 + 1 = 0").roots
        []
    """
    data = solve_single_equation(equation, variable, max_roots=max_roots)
    if not data.get("ok"):
        return SolveResult(
            ok=False,
            error=data.get("error"),
            error_code=data.get("error_code"),
            error_kind=data.get("error_kind"),
        )
    return SolveResult(
        ok=True,
        roots=data.get("roots", []),
        exact=data.get("exact"),
        approx=data.get("approx"),
        steps=data.get("steps", []),
    )


def solve_inequality(
    inequality: str,
    variable: str | None = None,
    domain: tuple[float, float] | None = None,
    samples: int | None = None,
) -> InequalityResult:
    """Solve a single-variable inequality numerically.

    Args:
        inequality: Inequality string (e.g., "x - 1 > 0")
        variable: Unknown to solve for (default: "x")
        domain: Scan window for critical points (default: (-50, 50))
        samples: Scan resolution (default: 1000)

    Returns:
        InequalityResult with merged open intervals and the derivation trail

    Example:
        >>> from sarva_pkg.api import solve_inequality
        >>> solve_inequality("x - 1 > 0").solution
        '(1, ∞)'
    """
    data = _solve_inequality(inequality, variable, domain=domain, samples=samples)
    if not data.get("ok"):
        return InequalityResult(
            ok=False,
            error=data.get("error"),
            error_code=data.get("error_code"),
            error_kind=data.get("error_kind"),
        )
    return InequalityResult(
        ok=True,
        operator=data.get("operator"),
        intervals=data.get("intervals", []),
        critical_points=data.get("critical_points", []),
        solution=data.get("solution"),
        steps=data.get("steps", []),
    )


def solve(text: str, variable: str | None = None) -> SolveResult | InequalityResult:
    """Dispatch to :func:`solve_equation` or :func:`solve_inequality`.

    Text with an inequality operator is treated as an inequality; anything
    else (including malformed text) goes through the equation path so that
    it is reported as an equation error.
    """
    try:
        op = detect_operator(preprocess(text))
    except ValidationError:
        op = None
    if op in config.INEQUALITY_OPERATORS:
        return solve_inequality(text, variable)
    return solve_equation(text, variable)


def plot(
    text: str,
    variable: str | None = None,
    x_min: float = -10,
    x_max: float = 10,
    ascii: bool = False,
    output_path: str | None = None,
) -> PlotResult:
    """Plot the difference function of an equation or inequality.

    Example:
        >>> from sarva_pkg.api import plot
        >>> result = plot("x^2 = 4", ascii=True)
        >>> result.ok
        True
    """
    return plot_relation(
        text, variable, x_min, x_max, ascii=ascii, output_path=output_path
    )
