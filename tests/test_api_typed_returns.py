"""Test that API functions return typed dataclasses."""

import json
import math

import pytest

from sarva_pkg.api import plot, solve, solve_equation, solve_inequality
from sarva_pkg.types import InequalityResult, Interval, PlotResult, SolveResult


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_solve_equation_returns_solve_result(self):
        result = solve_equation("x^2 - 4 = 0")
        assert isinstance(result, SolveResult)
        assert result.ok is True
        assert result.result_type == "equation"
        assert result.approx == ["-2.000000", "2.000000"]
        assert result.exact == ["-2", "2"]
        assert result.has_solutions
        assert result.steps

    def test_solve_equation_empty_is_not_an_error(self):
        result = solve_equation("x^2 + 1 = 0")
        assert result.ok is True
        assert result.roots == []
        assert not result.has_solutions
        assert result.error is None

    def test_solve_equation_error_returns_solve_result(self):
        result = solve_equation("x = x = 1")
        assert isinstance(result, SolveResult)
        assert result.ok is False
        assert result.error is not None
        assert result.error_code == "MALFORMED_INPUT"
        assert result.error_kind == "malformed_input"
        assert "ok=False" in repr(result)

    def test_solve_inequality_returns_inequality_result(self):
        result = solve_inequality("x - 1 > 0")
        assert isinstance(result, InequalityResult)
        assert result.ok is True
        assert result.operator == ">"
        assert result.solution == "(1, ∞)"
        assert result.intervals == [Interval(result.intervals[0].lo, math.inf)]
        assert not result.is_empty

    def test_solve_inequality_error_returns_inequality_result(self):
        result = solve_inequality("x + q < 1")
        assert isinstance(result, InequalityResult)
        assert result.ok is False
        assert result.error_kind == "compile_error"

    def test_solve_dispatches_on_operator(self):
        assert isinstance(solve("x^2 = 4"), SolveResult)
        assert isinstance(solve("x^2 <= 4"), InequalityResult)
        assert isinstance(solve("x^2 ≥ 4"), InequalityResult)

    def test_solve_without_operator_is_malformed(self):
        result = solve("x^2 + 1")
        assert result.ok is False
        assert result.error_kind == "malformed_input"

    def test_solve_empty_input(self):
        result = solve("")
        assert result.ok is False
        assert result.error_code == "EMPTY_INPUT"

    def test_to_dict_is_json_serializable(self):
        for result in (
            solve("x^2 = 4"),
            solve("x^2 > 4"),
            solve("x = = 1"),
            solve("x + y > 1"),
        ):
            data = result.to_dict()
            assert data["ok"] is result.ok
            json.dumps(data, ensure_ascii=False)

    def test_inequality_to_dict(self):
        data = solve_inequality("x^2 > 4").to_dict()
        assert data["type"] == "inequality"
        assert data["intervals"][0] == ["-inf", pytest.approx(-2.0)]
        assert data["intervals"][1] == [pytest.approx(2.0), "inf"]
        assert data["solution"] == "(-∞, -2) ∪ (2, ∞)"

    def test_plot_returns_plot_result(self):
        result = plot("x^2 = 4", ascii=True)
        assert isinstance(result, PlotResult)
        assert result.ok is True
