"""Plot ``f(x) = lhs - rhs`` for an equation or inequality.

Roots are marked on the curve for equations; for inequalities the solution
intervals are shaded. Matplotlib renders with the non-GUI Agg backend and
the figure is saved as a PNG; ``ascii=True`` returns a text plot instead.
"""

from __future__ import annotations

import math
import tempfile

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend (no Tkinter required)
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from . import config  # noqa: E402
from .compiler import compile_relation  # noqa: E402
from .logging_config import get_logger  # noqa: E402
from .parser import detect_operator, preprocess, split_relation  # noqa: E402
from .solver import (  # noqa: E402
    classify_intervals,
    find_critical_points,
    find_roots,
    merge_intervals,
)
from .types import Interval, ParseError, PlotResult, ValidationError  # noqa: E402

logger = get_logger("plotting")

# Dimensions of the ASCII plot in characters
ASCII_ROWS = 20
ASCII_COLS = 60


def _ascii_plot(
    x_vals: np.ndarray,
    y_vals: np.ndarray,
    x_min: float,
    x_max: float,
    marks: list[float],
) -> str | None:
    finite = np.isfinite(y_vals) & (np.abs(y_vals) < 1e10)
    if not finite.any():
        return None
    y_min, y_max = float(y_vals[finite].min()), float(y_vals[finite].max())
    y_range = y_max - y_min if y_max != y_min else 1.0
    grid = [[" " for _ in range(ASCII_COLS)] for _ in range(ASCII_ROWS)]

    def column(x: float) -> int:
        col = int((x - x_min) / (x_max - x_min) * (ASCII_COLS - 1))
        return max(0, min(ASCII_COLS - 1, col))

    def row(y: float) -> int:
        r = int((y_max - y) / y_range * (ASCII_ROWS - 1))
        return max(0, min(ASCII_ROWS - 1, r))

    if y_min <= 0 <= y_max:
        axis_row = row(0.0)
        for c in range(ASCII_COLS):
            grid[axis_row][c] = "-"
    if x_min <= 0 <= x_max:
        axis_col = column(0.0)
        for r in range(ASCII_ROWS):
            grid[r][axis_col] = "+" if grid[r][axis_col] == "-" else "|"
    for x, y, ok in zip(x_vals, y_vals, finite):
        if ok:
            grid[row(float(y))][column(float(x))] = "*"
    if y_min <= 0 <= y_max:
        for mark in marks:
            if x_min <= mark <= x_max:
                grid[row(0.0)][column(mark)] = "o"
    return "\n".join("".join(line) for line in grid)


def plot_relation(
    relation_str: str,
    variable: str | None = None,
    x_min: float = -10,
    x_max: float = 10,
    points: int | None = None,
    ascii: bool = False,
    output_path: str | None = None,
) -> PlotResult:
    """Plot the difference function of an equation or inequality.

    Args:
        relation_str: Text such as "x^2 = 4" or "x^2 - 4 > 0"
        variable: Unknown (default: "x")
        x_min: Left edge of the plot
        x_max: Right edge of the plot
        points: Number of samples across the window (default: 800)
        ascii: If True, return an ASCII plot instead of an image
        output_path: PNG destination (default: a temporary file)

    Returns:
        PlotResult with the file path or ASCII text, or an error
    """
    variable = variable or config.DEFAULT_VARIABLE
    points = points or config.PLOT_POINTS
    if not x_min < x_max:
        return PlotResult(ok=False, error="Plot range must satisfy x_min < x_max")
    try:
        text = preprocess(relation_str)
        op = detect_operator(text)
        allowed = config.INEQUALITY_OPERATORS if op in config.INEQUALITY_OPERATORS else (
            config.EQUATION_OPERATOR,
        )
        lhs, op, rhs = split_relation(text, allowed)
        relation = compile_relation(lhs, rhs, variable)
    except (ValidationError, ParseError) as e:
        return PlotResult(ok=False, error=str(e))

    x_vals = np.linspace(x_min, x_max, points)
    y_vals = np.array([relation.f(float(x)) for x in x_vals], dtype=float)

    intervals: list[Interval] = []
    if op == config.EQUATION_OPERATOR:
        marks = find_roots(relation.f, relation.df)
    else:
        critical = find_critical_points(relation.f)
        intervals = merge_intervals(classify_intervals(relation.f, critical, op))
        marks = [c for c in critical if x_min <= c <= x_max]

    if ascii:
        art = _ascii_plot(x_vals, y_vals, x_min, x_max, marks)
        if art is None:
            return PlotResult(ok=False, error="Cannot plot: function values out of range")
        return PlotResult(ok=True, result=f"ASCII plot:\n{art}")

    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        y_plot = np.where(np.isfinite(y_vals), y_vals, np.nan)
        ax.plot(x_vals, y_plot, linewidth=2, color="#2E86AB", label=f"f({variable}) = {relation.display}")
        for interval in intervals:
            lo = max(interval.lo, x_min)
            hi = min(interval.hi, x_max)
            if lo < hi:
                ax.axvspan(lo, hi, color="#76C893", alpha=0.25)
        visible = [m for m in marks if x_min <= m <= x_max and not math.isnan(m)]
        if visible:
            ax.scatter(
                visible,
                [0.0] * len(visible),
                color="#D62828",
                zorder=3,
                label="roots" if op == config.EQUATION_OPERATOR else "critical points",
            )
        ax.set_xlabel(variable, fontsize=12, fontweight="bold")
        ax.set_ylabel(f"f({variable})", fontsize=12, fontweight="bold")
        ax.set_title(f"{relation_str}", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.axhline(y=0, color="k", linewidth=0.8, alpha=0.3)
        ax.axvline(x=0, color="k", linewidth=0.8, alpha=0.3)
        ax.legend(loc="best", fontsize=10)
        plt.tight_layout()

        if output_path is None:
            with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as handle:
                output_path = handle.name
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    except (OSError, ValueError) as e:
        logger.error("Failed to save plot: %s", e, exc_info=True)
        return PlotResult(ok=False, error=f"Failed to save plot: {e}")
    finally:
        plt.close(fig)
    return PlotResult(ok=True, result=output_path)
