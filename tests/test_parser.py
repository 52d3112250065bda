"""Unit tests for parser module."""

import math
import unittest

import sympy as sp

from sarva_pkg.parser import (
    detect_operator,
    format_boundary,
    format_intervals,
    format_number,
    format_root,
    parse_preprocessed,
    prettify_expr,
    preprocess,
    split_relation,
    to_fraction,
)
from sarva_pkg.types import (
    ExpressionCompileError,
    Interval,
    MalformedInputError,
    ValidationError,
)

INEQUALITY_OPS = ("<=", ">=", "<", ">")


class TestPreprocess(unittest.TestCase):
    """Test input preprocessing."""

    def test_caret_to_power(self):
        self.assertEqual(preprocess("x^2 - 4 = 0"), "x**2 - 4 = 0")

    def test_implicit_multiplication(self):
        self.assertEqual(preprocess("3x^3 - 4x + 1 = 0"), "3*x**3 - 4*x + 1 = 0")
        self.assertEqual(preprocess("2(x+1) = 0"), "2*(x+1) = 0")

    def test_scientific_notation_untouched(self):
        self.assertEqual(preprocess("x - 1e-3 = 0"), "x - 1e-3 = 0")

    def test_unicode_symbols(self):
        self.assertEqual(preprocess("x − 1 ≥ 0"), "x - 1 >= 0")
        self.assertEqual(preprocess("x ≤ 2"), "x <= 2")
        self.assertEqual(preprocess("2×x ÷ 4 = π"), "2*x / 4 = pi")

    def test_superscripts(self):
        self.assertEqual(preprocess("x² + 1 = 0"), "x**2 + 1 = 0")
        self.assertEqual(preprocess("x⁻¹ = 2"), "x**-1 = 2")

    def test_unicode_sqrt(self):
        self.assertEqual(preprocess("√x = 2"), "sqrt(x) = 2")
        self.assertEqual(preprocess("√(x+1) = 2"), "sqrt(x+1) = 2")

    def test_reversed_inequality_spelling(self):
        self.assertEqual(preprocess("x => 1"), "x >= 1")
        self.assertEqual(preprocess("x =< 1"), "x <= 1")

    def test_whitespace_collapsed(self):
        self.assertEqual(preprocess("  x   +  1   =  0 "), "x + 1 = 0")

    def test_empty_input(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("   ")
        self.assertEqual(ctx.exception.code, "EMPTY_INPUT")

    def test_unbalanced_parentheses(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("(x + 1 = 0")
        self.assertEqual(ctx.exception.code, "UNBALANCED_PARENS")

    def test_forbidden_token(self):
        with self.assertRaises(ValidationError) as ctx:
            preprocess("__import__('os') = 1")
        self.assertEqual(ctx.exception.code, "FORBIDDEN_TOKEN")


class TestSplitRelation(unittest.TestCase):
    """Test splitting relations into sides and operator."""

    def test_equation(self):
        self.assertEqual(split_relation("x**2 = 4", ("=",)), ("x**2", "=", "4"))

    def test_non_strict_inequality(self):
        self.assertEqual(split_relation("x >= 1", INEQUALITY_OPS), ("x", ">=", "1"))

    def test_strict_inequality(self):
        self.assertEqual(
            split_relation("(x-4)/(x-1) > (x/3)+4", INEQUALITY_OPS),
            ("(x-4)/(x-1)", ">", "(x/3)+4"),
        )

    def test_missing_operator(self):
        with self.assertRaises(MalformedInputError):
            split_relation("x + 1", ("=",))

    def test_multiple_operators(self):
        with self.assertRaises(MalformedInputError):
            split_relation("x = x = 1", ("=",))

    def test_chained_inequality_rejected(self):
        with self.assertRaises(MalformedInputError):
            split_relation("0 < x < 5", INEQUALITY_OPS)

    def test_wrong_operator(self):
        with self.assertRaises(MalformedInputError):
            split_relation("x > 1", ("=",))
        with self.assertRaises(MalformedInputError):
            split_relation("x = 1", INEQUALITY_OPS)
        with self.assertRaises(MalformedInputError):
            split_relation("x == 1", ("=",))

    def test_empty_side(self):
        with self.assertRaises(MalformedInputError) as ctx:
            split_relation("= 4", ("=",))
        self.assertEqual(ctx.exception.code, "MALFORMED_INPUT")

    def test_detect_operator(self):
        self.assertEqual(detect_operator("x <= 1"), "<=")
        self.assertEqual(detect_operator("x = 1"), "=")
        self.assertIsNone(detect_operator("x + 1"))


class TestParsePreprocessed(unittest.TestCase):
    """Test SymPy parsing of a single side."""

    def test_variable_is_real(self):
        expr = parse_preprocessed("x**2 + 1", "x")
        (symbol,) = expr.free_symbols
        self.assertTrue(symbol.is_real)

    def test_removable_singularity_kept(self):
        expr = parse_preprocessed("(x-1)/(x-1)", "x")
        self.assertNotEqual(expr, sp.Integer(1))

    def test_syntax_error(self):
        with self.assertRaises(ExpressionCompileError):
            parse_preprocessed("x +* 2", "x")

    def test_unterminated_expression(self):
        with self.assertRaises(ExpressionCompileError):
            parse_preprocessed("(x + 1", "x")

    def test_relational_inside_side_rejected(self):
        with self.assertRaises(ExpressionCompileError):
            parse_preprocessed("x < 1", "x")


class TestFormatting(unittest.TestCase):
    """Test result formatting helpers."""

    def test_format_boundary_integer_snap(self):
        self.assertEqual(format_boundary(2.0000000001), "2")
        self.assertEqual(format_boundary(-8.0000001), "-8")
        self.assertEqual(format_boundary(0.0), "0")

    def test_format_boundary_radical(self):
        self.assertEqual(format_boundary(math.sqrt(2)), "√2")
        self.assertEqual(format_boundary(-math.sqrt(3)), "-√3")

    def test_format_boundary_decimal(self):
        self.assertEqual(format_boundary(0.25), "0.250")
        self.assertEqual(format_boundary(0.9999), "1.000")

    def test_format_boundary_infinite(self):
        self.assertEqual(format_boundary(math.inf), "∞")
        self.assertEqual(format_boundary(-math.inf), "-∞")

    def test_format_intervals(self):
        intervals = [Interval(-math.inf, -2.0), Interval(2.0, math.inf)]
        self.assertEqual(format_intervals(intervals), "(-∞, -2) ∪ (2, ∞)")
        self.assertEqual(format_intervals([]), "∅")

    def test_format_root(self):
        self.assertEqual(format_root(2.0), "2.000000")
        self.assertEqual(format_root(1 / 3), "0.333333")

    def test_to_fraction(self):
        self.assertEqual(to_fraction(0.5), "1/2")
        self.assertEqual(to_fraction(-2.0000000001), "-2")
        self.assertEqual(to_fraction(1 / 3), "1/3")

    def test_to_fraction_non_finite(self):
        self.assertEqual(to_fraction(math.inf), "inf")
        self.assertEqual(to_fraction(math.nan), "nan")

    def test_format_number(self):
        self.assertEqual(format_number(0.5), "0.5")
        self.assertEqual(format_number("abc"), "abc")

    def test_prettify_expr(self):
        self.assertEqual(prettify_expr("x**2"), "x²")
        self.assertEqual(prettify_expr("2*sqrt(x)"), "2·√(x)")


if __name__ == "__main__":
    unittest.main()
