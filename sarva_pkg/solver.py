"""Numeric equation and inequality solving module.

This module provides:
- Multi-seed Newton-Raphson root finding for ``lhs = rhs``
- Critical point detection (zero crossings and discontinuities) by dense
  sampling plus bisection refinement
- Sign classification of the intervals between critical points
- Merging of adjacent accepted intervals
- ``solve_single_equation`` / ``solve_inequality`` front ends that parse
  the user's text, run the engine and build a derivation trail

The engine is heuristic: it searches fixed windows (seeds in [-10, 10] for
equations, samples in [-50, 50] for inequalities) and may miss roots that
are closer together than its resolution or that lie outside the window.

Engine functions take the function and their settings as arguments and
return plain data. Front ends return dictionaries with an 'ok' boolean;
the public API (api.py) converts them to typed dataclasses.
"""

from __future__ import annotations

import math
import operator as _operator
from typing import Any, Callable, Iterable, Sequence

from . import config
from .compiler import compile_relation
from .logging_config import get_logger
from .parser import (
    format_boundary,
    format_intervals,
    format_number,
    format_root,
    prettify_expr,
    preprocess,
    split_relation,
    to_fraction,
)
from .types import Interval, ParseError, ScalarFunction, ValidationError

logger = get_logger("solver")

MALFORMED_INPUT = "malformed_input"
COMPILE_ERROR = "compile_error"

COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    ">": _operator.gt,
    ">=": _operator.ge,
    "<": _operator.lt,
    "<=": _operator.le,
}


def seed_points(
    seed_min: float | None = None,
    seed_max: float | None = None,
    step: float | None = None,
) -> list[float]:
    """Starting points for Newton-Raphson, ``seed_min`` to ``seed_max`` inclusive."""
    seed_min = config.SEED_MIN if seed_min is None else seed_min
    seed_max = config.SEED_MAX if seed_max is None else seed_max
    step = config.SEED_STEP if step is None else step
    if step <= 0:
        raise ValueError("Seed step must be positive")
    count = int(math.floor((seed_max - seed_min) / step + 1e-9))
    return [seed_min + i * step for i in range(count + 1)]


def find_roots(
    f: ScalarFunction,
    df: ScalarFunction,
    max_iterations: int | None = None,
    tolerance: float | None = None,
    max_roots: int | None = None,
    seeds: Sequence[float] | None = None,
) -> list[float]:
    """Find real roots of ``f`` by running Newton-Raphson from many seeds.

    Each seed iterates ``x <- x - f(x)/f'(x)`` until the step is smaller
    than ``tolerance``. A seed is abandoned without a root when the
    derivative is flat (``|f'(x)| < 1e-12``), when ``f`` or ``f'`` stops
    being finite, or when ``max_iterations`` is exhausted. A converged
    value is kept unless an accepted root lies within 1e-4 of it. Scanning
    stops once ``max_roots`` roots have been accepted.

    Args:
        f: Function whose zeros are wanted
        df: Derivative of ``f``
        max_iterations: Newton steps per seed (default: 50)
        tolerance: Step-size convergence threshold (default: 1e-7)
        max_roots: Cap on returned roots (default: 10)
        seeds: Starting points (default: -10, -9.5, ..., 10)

    Returns:
        Roots in strictly ascending order; empty if nothing converged
    """
    max_iterations = config.NEWTON_MAX_ITERATIONS if max_iterations is None else max_iterations
    tolerance = config.NEWTON_TOLERANCE if tolerance is None else tolerance
    max_roots = config.MAX_ROOTS if max_roots is None else max_roots
    seeds = seed_points() if seeds is None else seeds
    flat = config.FLAT_DERIVATIVE_TOLERANCE
    dedup = config.ROOT_DEDUP_TOLERANCE

    roots: list[float] = []
    abandoned = 0
    for seed in seeds:
        if len(roots) >= max_roots:
            break
        x = float(seed)
        for _ in range(max_iterations):
            y = f(x)
            dy = df(x)
            if not (math.isfinite(y) and math.isfinite(dy)) or abs(dy) < flat:
                abandoned += 1
                break
            x_new = x - y / dy
            if abs(x_new - x) < tolerance:
                if all(abs(root - x_new) >= dedup for root in roots):
                    roots.append(x_new)
                break
            x = x_new
    if abandoned:
        logger.debug("Newton-Raphson abandoned %d of %d seeds", abandoned, len(seeds))
    return sorted(roots)


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _bisect(
    f: ScalarFunction, a: float, b: float, y_a: float, iterations: int
) -> float:
    """Refine a sign change between ``a`` and ``b`` (``y_a = f(a)``)."""
    sign_a = _sign(y_a)
    for _ in range(iterations):
        mid = (a + b) / 2
        y_mid = f(mid)
        if y_mid == 0:
            return mid
        if _sign(y_mid) == sign_a:
            a = mid
        else:
            b = mid
    return (a + b) / 2


def _dedupe_sorted(values: Iterable[float], tolerance: float) -> list[float]:
    """Sort and drop values within ``tolerance`` of the previously kept one."""
    kept: list[float] = []
    for value in sorted(values):
        if not kept or value - kept[-1] >= tolerance:
            kept.append(value)
    return kept


def sample_points(domain: tuple[float, float], samples: int) -> list[float]:
    """``samples + 1`` evenly spaced points covering ``domain``."""
    lo, hi = domain
    return [lo + (hi - lo) * (i / samples) for i in range(samples + 1)]


def find_critical_points(
    f: ScalarFunction,
    domain: tuple[float, float] | None = None,
    samples: int | None = None,
    bisection_iterations: int | None = None,
) -> list[float]:
    """Locate zero crossings and discontinuities of ``f`` inside ``domain``.

    ``f`` is sampled at ``samples + 1`` evenly spaced points. For each
    consecutive pair of samples:

    - if either value is non-finite, both x positions are recorded (the
      true location of the singularity is only known to lie between them);
    - else if the left value is exactly zero, its x is recorded;
    - else if the values have opposite signs, the crossing is refined by
      bisection and the final bracket midpoint is recorded.

    Crossings closer together than the sample spacing (0.1 for the default
    window) can be missed or merged.
    A function with no finite sample anywhere has no critical points.

    Args:
        f: Function to scan
        domain: (min, max) window (default: (-50, 50))
        samples: Number of sub-intervals (default: 1000)
        bisection_iterations: Refinement steps per crossing (default: 20)

    Returns:
        Ascending critical points, no two closer than 1e-6
    """
    if domain is None:
        domain = (config.SCAN_DOMAIN_MIN, config.SCAN_DOMAIN_MAX)
    samples = config.SCAN_SAMPLES if samples is None else samples
    bisection_iterations = (
        config.BISECTION_ITERATIONS if bisection_iterations is None else bisection_iterations
    )
    if samples < 1:
        raise ValueError("samples must be at least 1")
    if not domain[0] < domain[1]:
        raise ValueError(f"Invalid domain {domain}: min must be less than max")

    xs = sample_points(domain, samples)
    critical: set[float] = set()
    non_finite = 0
    x_prev = xs[0]
    y_prev = f(x_prev)
    any_finite = math.isfinite(y_prev)
    for x_curr in xs[1:]:
        y_curr = f(x_curr)
        any_finite = any_finite or math.isfinite(y_curr)
        if not (math.isfinite(y_prev) and math.isfinite(y_curr)):
            critical.add(x_prev)
            critical.add(x_curr)
            non_finite += 1
        elif y_prev == 0:
            critical.add(x_prev)
        elif y_prev * y_curr < 0:
            critical.add(_bisect(f, x_prev, x_curr, y_prev, bisection_iterations))
        x_prev, y_prev = x_curr, y_curr

    if not any_finite:
        logger.debug("No finite samples in %s; no critical points", domain)
        return []
    if non_finite:
        logger.debug("%d sample pairs touched non-finite values", non_finite)
    return _dedupe_sorted(critical, config.BOUNDARY_TOLERANCE)


def representative_point(lo: float, hi: float) -> float:
    """Point used to test the sign of ``f`` on the open interval (lo, hi)."""
    if math.isinf(lo) and math.isinf(hi):
        return 0.0
    if math.isinf(lo):
        return hi - 1
    if math.isinf(hi):
        return lo + 1
    return (lo + hi) / 2


def classify_intervals(
    f: ScalarFunction,
    boundaries: Iterable[float],
    op: str,
    trail: list[str] | None = None,
) -> list[Interval]:
    """Return the gaps between boundaries on which ``f op 0`` holds.

    The real line is cut at ``boundaries`` (plus -inf and +inf) and ``f``
    is evaluated once per gap at :func:`representative_point`. Gaps whose
    probe value is non-finite are skipped. When ``trail`` is given, one
    line per tested gap is appended to it.

    Raises:
        ValueError: If ``op`` is not one of <, <=, >, >=
    """
    try:
        compare = COMPARATORS[op]
    except KeyError:
        raise ValueError(f"Unsupported operator: {op!r}") from None

    bounds = [-math.inf, *sorted(set(boundaries)), math.inf]
    accepted: list[Interval] = []
    for lo, hi in zip(bounds, bounds[1:]):
        probe = representative_point(lo, hi)
        value = f(probe)
        if not math.isfinite(value):
            if trail is not None:
                trail.append(
                    f"Test x = {format_number(probe)} in ({format_boundary(lo)}, "
                    f"{format_boundary(hi)}): undefined, skipped"
                )
            continue
        holds = compare(value, 0)
        if trail is not None:
            trail.append(
                f"Test x = {format_number(probe)} in ({format_boundary(lo)}, "
                f"{format_boundary(hi)}): f = {format_number(value)} "
                f"{'holds' if holds else 'fails'}"
            )
        if holds:
            accepted.append(Interval(lo, hi))
    return accepted


def merge_intervals(
    intervals: Iterable[Interval], tolerance: float | None = None
) -> list[Interval]:
    """Coalesce intervals that touch (shared boundary within ``tolerance``).

    Intervals are processed by ascending ``lo``; a candidate whose ``lo`` is
    within 1e-6 of the previous ``hi`` (or overlaps it) extends the previous
    interval. The result is sorted and non-overlapping, and merging it again
    changes nothing.
    """
    tolerance = config.BOUNDARY_TOLERANCE if tolerance is None else tolerance
    merged: list[Interval] = []
    for candidate in sorted(intervals, key=lambda iv: (iv.lo, iv.hi)):
        if merged:
            previous = merged[-1]
            if abs(candidate.lo - previous.hi) < tolerance or candidate.lo < previous.hi:
                merged[-1] = Interval(previous.lo, max(previous.hi, candidate.hi))
                continue
        merged.append(candidate)
    return merged


def _error(e: ValidationError | ParseError) -> dict[str, Any]:
    # Input that never reached the compiler is malformed; everything the
    # compiler rejects is a compile error.
    kind = MALFORMED_INPUT if isinstance(e, ValidationError) else COMPILE_ERROR
    return {"ok": False, "error": str(e), "error_code": e.code, "error_kind": kind}


def solve_single_equation(
    eq_str: str,
    variable: str | None = None,
    max_roots: int | None = None,
) -> dict[str, Any]:
    """
    Solve an equation of the form ``lhs = rhs`` numerically.

    Args:
        eq_str: Equation string (e.g., "x^3 - 4x + 1 = 0")
        variable: Unknown to solve for (default: "x")
        max_roots: Cap on reported roots (default: 10)

    Returns:
        Dictionary with keys:
            - ok: Boolean indicating success
            - type: "equation"
            - roots: Sorted list of float roots (empty if none were found)
            - approx: Roots as fixed-precision decimals
            - exact: Roots as reduced-fraction approximations
            - steps: Derivation trail
            - error / error_code: Present when ok is False
    """
    variable = variable or config.DEFAULT_VARIABLE
    try:
        text = preprocess(eq_str)
        lhs, _, rhs = split_relation(text, (config.EQUATION_OPERATOR,))
        relation = compile_relation(lhs, rhs, variable)
    except ValidationError as e:
        logger.info("Rejected equation %r: %s", eq_str, e)
        return _error(e)
    except ParseError as e:
        logger.info("Could not compile equation %r: %s", eq_str, e)
        return _error(e)

    seeds = seed_points()
    steps = [
        f"Form f({variable}) = {prettify_expr(lhs)} − ({prettify_expr(rhs)})",
        f"Derivative f'({variable}) = {prettify_expr(str(relation.derivative))}",
        f"Run Newton-Raphson from {len(seeds)} seeds in "
        f"[{format_number(seeds[0])}, {format_number(seeds[-1])}]",
    ]
    roots = find_roots(relation.f, relation.df, max_roots=max_roots, seeds=seeds)
    if roots:
        steps.append(f"Roots found: {len(roots)}")
        for index, root in enumerate(roots, start=1):
            steps.append(f"{variable}{index} = {format_root(root)} ({to_fraction(root)})")
    else:
        steps.append("No real solutions found.")

    return {
        "ok": True,
        "type": "equation",
        "variable": variable,
        "roots": roots,
        "approx": [format_root(r) for r in roots],
        "exact": [to_fraction(r) for r in roots],
        "steps": steps,
    }


def solve_inequality(
    ineq_str: str,
    variable: str | None = None,
    domain: tuple[float, float] | None = None,
    samples: int | None = None,
) -> dict[str, Any]:
    """
    Solve an inequality ``lhs op rhs`` with ``op`` in <, <=, >, >=.

    Boundaries are always reported open, whatever the operator.

    Args:
        ineq_str: Inequality string (e.g., "(x-4)/(x-1) > (x/3)+4")
        variable: Unknown to solve for (default: "x")
        domain: Scan window for critical points (default: (-50, 50))
        samples: Scan resolution (default: 1000)

    Returns:
        Dictionary with keys:
            - ok: Boolean indicating success
            - type: "inequality"
            - operator: The relational operator
            - critical_points: Boundaries found by the scan
            - intervals: Merged list of Interval
            - solution: Union-of-intervals string, or "∅"
            - steps: Derivation trail
            - error / error_code: Present when ok is False
    """
    variable = variable or config.DEFAULT_VARIABLE
    try:
        text = preprocess(ineq_str)
        lhs, op, rhs = split_relation(text, config.INEQUALITY_OPERATORS)
        relation = compile_relation(lhs, rhs, variable)
    except ValidationError as e:
        logger.info("Rejected inequality %r: %s", ineq_str, e)
        return _error(e)
    except ParseError as e:
        logger.info("Could not compile inequality %r: %s", ineq_str, e)
        return _error(e)

    critical = find_critical_points(relation.f, domain=domain, samples=samples)
    steps = [
        f"Form f({variable}) = {prettify_expr(lhs)} − ({prettify_expr(rhs)})",
        "Critical points: "
        + (", ".join(format_boundary(c) for c in critical) if critical else "none"),
        "Merge adjacent intervals where boundaries coincide",
        f"Test each merged interval to see where f({variable}) {op} 0",
    ]
    accepted = classify_intervals(relation.f, critical, op, trail=steps)
    intervals = merge_intervals(accepted)
    solution = format_intervals(intervals)
    steps.append(f"Solution: {solution}")

    return {
        "ok": True,
        "type": "inequality",
        "variable": variable,
        "operator": op,
        "critical_points": critical,
        "intervals": intervals,
        "solution": solution,
        "steps": steps,
    }
