"""Type definitions and result dataclasses for consistent API responses."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable

# A real-valued function of one real variable; non-finite results mark
# points where the expression is undefined.
ScalarFunction = Callable[[float], float]


@dataclass(frozen=True)
class Interval:
    """Open interval (lo, hi); either bound may be infinite."""

    lo: float
    hi: float

    def __post_init__(self) -> None:
        if not self.lo < self.hi:
            raise ValueError(f"Interval bounds must satisfy lo < hi, got ({self.lo}, {self.hi})")

    def contains(self, x: float) -> bool:
        return self.lo < x < self.hi

    @property
    def is_bounded(self) -> bool:
        return math.isfinite(self.lo) and math.isfinite(self.hi)

    def to_list(self) -> list[float | str]:
        """Convert to a JSON-safe pair (infinities become "-inf"/"inf")."""
        return [_json_float(self.lo), _json_float(self.hi)]


def _json_float(value: float) -> float | str:
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


@dataclass
class SolveResult:
    """Result of solving an equation."""

    ok: bool
    result_type: str = "equation"
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None  # "malformed_input" or "compile_error"
    roots: list[float] = field(default_factory=list)
    exact: list[str] | None = None  # fraction approximations
    approx: list[str] | None = None  # fixed-precision decimals
    steps: list[str] = field(default_factory=list)

    @property
    def has_solutions(self) -> bool:
        return self.ok and bool(self.roots)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "type": self.result_type}
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.error_kind is not None:
            result_dict["error_kind"] = self.error_kind
        if self.ok:
            result_dict["roots"] = list(self.roots)
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.approx is not None:
            result_dict["approx"] = self.approx
        if self.steps:
            result_dict["steps"] = self.steps
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"SolveResult(ok=False, error_code={self.error_code!r}, error={self.error!r})"
        return f"SolveResult(ok=True, roots={self.roots!r})"


@dataclass
class InequalityResult:
    """Result of solving an inequality."""

    ok: bool
    result_type: str = "inequality"
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None  # "malformed_input" or "compile_error"
    operator: str | None = None
    intervals: list[Interval] = field(default_factory=list)
    critical_points: list[float] = field(default_factory=list)
    solution: str | None = None  # e.g. "(-∞, 1) ∪ (3, ∞)" or "∅"
    steps: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.intervals

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "type": self.result_type}
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.error_kind is not None:
            result_dict["error_kind"] = self.error_kind
        if self.operator is not None:
            result_dict["operator"] = self.operator
        if self.ok:
            result_dict["intervals"] = [iv.to_list() for iv in self.intervals]
            result_dict["critical_points"] = list(self.critical_points)
        if self.solution is not None:
            result_dict["solution"] = self.solution
        if self.steps:
            result_dict["steps"] = self.steps
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"InequalityResult(ok=False, error_code={self.error_code!r}, error={self.error!r})"
        return f"InequalityResult(ok=True, solution={self.solution!r})"


@dataclass
class PlotResult:
    """Result of plotting a relation."""

    ok: bool
    result: str | None = None  # file path or ASCII art
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class MalformedInputError(ValidationError):
    """Raised when input is not of the form ``lhs <op> rhs``."""

    def __init__(self, message: str, code: str = "MALFORMED_INPUT"):
        super().__init__(message, code)


class ParseError(Exception):
    """Raised when parsing fails."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ExpressionCompileError(ParseError):
    """Raised when a side of a relation cannot be parsed or compiled."""

    def __init__(self, message: str, code: str = "COMPILE_ERROR"):
        super().__init__(message, code)
