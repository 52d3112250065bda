"""Test error codes returned by various functions."""

import unittest

from sarva_pkg.parser import preprocess, split_relation
from sarva_pkg.solver import solve_inequality, solve_single_equation
from sarva_pkg.types import (
    ExpressionCompileError,
    MalformedInputError,
    ParseError,
    ValidationError,
)


class TestErrorCodes(unittest.TestCase):
    """Test that functions return appropriate error codes."""

    def test_forbidden_token_error_code(self):
        try:
            preprocess("import os")
            self.fail("Should have raised ValidationError")
        except ValidationError as e:
            self.assertEqual(
                e.code, "FORBIDDEN_TOKEN", f"Expected FORBIDDEN_TOKEN, got {e.code}"
            )
            self.assertIn("forbidden", str(e).lower())

    def test_too_long_error_code(self):
        long_input = "x" * 10001  # Exceeds MAX_INPUT_LENGTH
        try:
            preprocess(long_input)
            self.fail("Should have raised ValidationError")
        except ValidationError as e:
            self.assertEqual(e.code, "TOO_LONG", f"Expected TOO_LONG, got {e.code}")
            self.assertIn("too long", str(e).lower())

    def test_malformed_input_is_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            split_relation("x + 1", ("=",))
        self.assertIsInstance(ctx.exception, MalformedInputError)
        self.assertEqual(ctx.exception.code, "MALFORMED_INPUT")

    def test_compile_error_is_parse_error(self):
        error = ExpressionCompileError("bad")
        self.assertIsInstance(error, ParseError)
        self.assertEqual(error.code, "COMPILE_ERROR")
        self.assertEqual(str(error), "bad")

    def test_invalid_equation_format_error(self):
        result = solve_single_equation("x = x = 1")  # Invalid: multiple equals
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "MALFORMED_INPUT")
        self.assertEqual(result.get("error_kind"), "malformed_input")

    def test_forbidden_token_in_equation(self):
        result = solve_single_equation("eval(x) = 1")
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "FORBIDDEN_TOKEN")
        self.assertEqual(result.get("error_kind"), "malformed_input")

    def test_unbalanced_inequality(self):
        result = solve_inequality("(x + 1 > 0")
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "UNBALANCED_PARENS")

    def test_unknown_symbol_error_code(self):
        result = solve_single_equation("x + y = 1")
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "UNKNOWN_SYMBOL")
        self.assertEqual(result.get("error_kind"), "compile_error")

    def test_invalid_variable_error_code(self):
        result = solve_single_equation("x = 1", variable="2bad")
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "INVALID_VARIABLE")

    def test_syntax_error_code(self):
        result = solve_inequality("x +* 1 > 0")
        self.assertFalse(result.get("ok"))
        self.assertEqual(result.get("error_code"), "COMPILE_ERROR")
        self.assertEqual(result.get("error_kind"), "compile_error")

    def test_errors_distinct_from_empty_result(self):
        empty = solve_single_equation("x^2 + 1 = 0")
        self.assertTrue(empty.get("ok"))
        self.assertNotIn("error", empty)


if __name__ == "__main__":
    unittest.main()
