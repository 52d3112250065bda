"""Unit tests for multi-seed Newton-Raphson root finding."""

import math
import unittest

from sarva_pkg.solver import find_roots, seed_points


def _poly(*roots):
    """Monic polynomial with the given roots and its derivative."""

    def f(x):
        value = 1.0
        for r in roots:
            value *= x - r
        return value

    def df(x):
        total = 0.0
        for i in range(len(roots)):
            term = 1.0
            for j, r in enumerate(roots):
                if j != i:
                    term *= x - r
            total += term
        return total

    return f, df


class TestSeedPoints(unittest.TestCase):
    def test_default_seeds(self):
        seeds = seed_points()
        self.assertEqual(len(seeds), 41)
        self.assertEqual(seeds[0], -10.0)
        self.assertEqual(seeds[-1], 10.0)
        self.assertAlmostEqual(seeds[1] - seeds[0], 0.5)

    def test_invalid_step(self):
        with self.assertRaises(ValueError):
            seed_points(-1, 1, 0)


class TestFindRoots(unittest.TestCase):
    """Test root finding against polynomials with known roots."""

    def test_quadratic(self):
        roots = find_roots(lambda x: x * x - 4, lambda x: 2 * x)
        self.assertEqual(len(roots), 2)
        self.assertAlmostEqual(roots[0], -2.0, places=6)
        self.assertAlmostEqual(roots[1], 2.0, places=6)

    def test_known_polynomials(self):
        for known in [(1.0,), (-3.0, 0.5), (-7.0, 0.0, 4.25), (-2.0, -1.0, 1.0, 2.0)]:
            f, df = _poly(*known)
            roots = find_roots(f, df)
            self.assertEqual(len(roots), len(known), known)
            for expected in known:
                self.assertTrue(
                    any(abs(r - expected) < 1e-4 for r in roots),
                    f"{expected} missing from {roots}",
                )

    def test_roots_strictly_ascending_and_separated(self):
        f, df = _poly(-5.0, -1.0, 2.0, 6.0)
        roots = find_roots(f, df)
        for a, b in zip(roots, roots[1:]):
            self.assertLess(a, b)
            self.assertGreaterEqual(b - a, 1e-4)

    def test_max_roots_cap(self):
        roots = find_roots(math.sin, math.cos, max_roots=3)
        self.assertLessEqual(len(roots), 3)
        self.assertEqual(roots, sorted(roots))
        for r in roots:
            self.assertLess(abs(math.sin(r)), 1e-6)

    def test_no_real_roots(self):
        self.assertEqual(find_roots(lambda x: x * x + 1, lambda x: 2 * x), [])

    def test_flat_derivative_abandons_seed(self):
        self.assertEqual(find_roots(lambda x: 5.0, lambda x: 0.0), [])

    def test_non_finite_values_abandon_seed(self):
        self.assertEqual(find_roots(lambda x: math.nan, lambda x: 1.0), [])

    def test_undefined_region_skipped(self):
        # log(x) = 0 only has a root at 1; seeds at x <= 0 are undefined
        def f(x):
            return math.log(x) if x > 0 else math.nan

        def df(x):
            return 1 / x if x > 0 else math.nan

        roots = find_roots(f, df)
        self.assertEqual(len(roots), 1)
        self.assertAlmostEqual(roots[0], 1.0, places=6)

    def test_custom_seeds(self):
        roots = find_roots(lambda x: x * x - 4, lambda x: 2 * x, seeds=[3.0])
        self.assertEqual(len(roots), 1)
        self.assertAlmostEqual(roots[0], 2.0, places=6)


if __name__ == "__main__":
    unittest.main()
