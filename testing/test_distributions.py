import math
import unittest

import numpy as np

from pplcore import Bernoulli, Exponential, Normal, Uniform, make_distribution


class TestDistributions(unittest.TestCase):
    """Densities, validation and sampling of the built-in distributions."""

    def test_normal_log_prob_at_mean(self):
        self.assertAlmostEqual(Normal(5, 1).log_prob(5), -0.5 * math.log(2 * math.pi))
        self.assertAlmostEqual(Normal(5, 1).log_prob(5), -0.91894, places=5)

    def test_normal_log_prob_off_mean(self):
        # N(0, 2) at x = 2: -0.5*log(2*pi*4) - 0.5
        expected = -0.5 * math.log(2 * math.pi * 4) - 0.5
        self.assertAlmostEqual(Normal(0, 2).log_prob(2), expected)

    def test_uniform_log_prob(self):
        dist = Uniform(2, 6)
        self.assertAlmostEqual(dist.log_prob(3), -math.log(4))
        self.assertAlmostEqual(dist.log_prob(2), -math.log(4))
        self.assertAlmostEqual(dist.log_prob(6), -math.log(4))
        self.assertEqual(dist.log_prob(1.999), -math.inf)
        self.assertEqual(dist.log_prob(6.001), -math.inf)

    def test_bernoulli_log_prob(self):
        dist = Bernoulli(0.25)
        self.assertAlmostEqual(dist.log_prob(1), math.log(0.25))
        self.assertAlmostEqual(dist.log_prob(0), math.log(0.75))
        self.assertEqual(dist.log_prob(0.5), -math.inf)

    def test_bernoulli_degenerate(self):
        self.assertEqual(Bernoulli(0).log_prob(1), -math.inf)
        self.assertEqual(Bernoulli(1).log_prob(1), 0.0)
        self.assertEqual(Bernoulli(1).log_prob(0), -math.inf)

    def test_exponential_log_prob(self):
        dist = Exponential(2)
        self.assertAlmostEqual(dist.log_prob(0.5), math.log(2) - 1)
        self.assertEqual(dist.log_prob(-0.1), -math.inf)

    def test_invalid_parameters(self):
        self.assertRaises(ValueError, Normal, 0, 0)
        self.assertRaises(ValueError, Normal, 0, -1)
        self.assertRaises(ValueError, Uniform, 1, 1)
        self.assertRaises(ValueError, Uniform, 2, 1)
        self.assertRaises(ValueError, Bernoulli, 1.5)
        self.assertRaises(ValueError, Bernoulli, -0.1)
        self.assertRaises(ValueError, Exponential, 0)

    def test_validate_returns_messages(self):
        self.assertIsNone(Normal.validate(0, 1))
        self.assertIn("stddev", Normal.validate(0, 0))
        self.assertIn("2 argument", Normal.validate(0))
        self.assertIn("min < max", Uniform.validate(3, 3))
        self.assertIn("[0, 1]", Bernoulli.validate(2))
        self.assertIn("lambda", Exponential.validate(-1))

    def test_non_finite_parameters_rejected(self):
        inf = float("inf")
        self.assertIn("finite", Exponential.validate(inf))
        self.assertIn("finite", Normal.validate(0, inf))
        self.assertIn("finite", Uniform.validate(-inf, 0))
        self.assertIn("finite", Bernoulli.validate(float("nan")))
        self.assertRaises(ValueError, Exponential, inf)

    def test_make_distribution(self):
        self.assertEqual(make_distribution("normal", [0, 1]), Normal(0, 1))
        self.assertRaises(ValueError, make_distribution, "uniform", [1, 0])
        self.assertRaises(KeyError, make_distribution, "cauchy", [0, 1])

    def test_repr(self):
        self.assertEqual(repr(Normal(0, 1.5)), "normal(0, 1.5)")
        self.assertEqual(repr(Bernoulli(0.5)), "bernoulli(0.5)")

    def test_samples_stay_in_support(self):
        rng = np.random.default_rng(0)
        uniform = Uniform(-1, 1)
        exponential = Exponential(3)
        bernoulli = Bernoulli(0.3)
        for _ in range(500):
            self.assertTrue(-1 <= uniform.sample(rng) <= 1)
            self.assertGreaterEqual(exponential.sample(rng), 0)
            self.assertIn(bernoulli.sample(rng), (0.0, 1.0))

    def test_sample_means_match_moments(self):
        """Sample means are within 4 standard errors of the analytical mean."""
        rng = np.random.default_rng(42)
        n = 20000
        for dist in (Normal(3, 2), Uniform(0, 10), Bernoulli(0.3), Exponential(0.5)):
            draws = np.array([dist.sample(rng) for _ in range(n)])
            tolerance = 4 * math.sqrt(dist.variance / n)
            self.assertAlmostEqual(draws.mean(), dist.mean, delta=tolerance, msg=repr(dist))

    def test_seeded_sampling_is_reproducible(self):
        dist = Normal(0, 1)
        a = [dist.sample(np.random.default_rng(7)) for _ in range(3)]
        b = [dist.sample(np.random.default_rng(7)) for _ in range(3)]
        self.assertEqual(a, b)


if __name__ == '__main__':
    unittest.main()
