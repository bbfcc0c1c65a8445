import math
import unittest

import numpy as np
from scipy.stats import lognorm

from gbm_risk.risk.parameters import InvalidParameter, ModelParameters
from gbm_risk.risk.var_calculator import (
    RiskMethod,
    RiskResult,
    analytic_gbm_risk,
    reduce_terminal_prices,
    tail_count,
)


class TailCountTests(unittest.TestCase):
    def test_ceiling_of_tail_fraction(self) -> None:
        self.assertEqual(tail_count(100, 0.95), 5)
        self.assertEqual(tail_count(100, 0.90), 10)
        self.assertEqual(tail_count(3, 0.5), 2)
        self.assertEqual(tail_count(10, 0.01), 10)

    def test_clamps_to_at_least_one(self) -> None:
        self.assertEqual(tail_count(1, 0.95), 1)
        self.assertEqual(tail_count(100, 0.999), 1)

    def test_representation_error_does_not_bump_count(self) -> None:
        # each product lands a few ulps above the integer
        self.assertEqual(tail_count(100, 0.95), 5)
        self.assertEqual(tail_count(1000, 0.99), 10)
        self.assertEqual(tail_count(20, 0.85), 3)

    def test_fractional_tail_rounds_up(self) -> None:
        self.assertEqual(tail_count(1000, 0.9985), 2)
        self.assertEqual(tail_count(50, 0.95), 3)


class ReduceTerminalPricesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.prices = np.arange(1.0, 101.0)
        np.random.default_rng(0).shuffle(self.prices)

    def test_var_and_es_at_95(self) -> None:
        result = reduce_terminal_prices(self.prices, 100.0, 0.95)
        self.assertEqual(result.var, 95.0)
        self.assertEqual(result.es, 97.0)
        self.assertEqual(result.sample_size, 100)
        self.assertEqual(result.method, RiskMethod.MONTE_CARLO.value)

    def test_var_and_es_at_90(self) -> None:
        result = reduce_terminal_prices(self.prices, 100.0, 0.90)
        self.assertEqual(result.var, 90.0)
        self.assertAlmostEqual(result.es, 94.5)

    def test_extreme_confidence_uses_single_worst_path(self) -> None:
        result = reduce_terminal_prices(self.prices, 100.0, 0.999)
        self.assertEqual(result.var, 99.0)
        self.assertEqual(result.es, 99.0)

    def test_gains_are_negative_losses(self) -> None:
        result = reduce_terminal_prices([110.0, 120.0, 130.0], 100.0, 0.5)
        self.assertEqual(result.var, -20.0)
        self.assertEqual(result.es, -15.0)

    def test_input_buffer_is_not_modified(self) -> None:
        before = self.prices.copy()
        reduce_terminal_prices(self.prices, 100.0, 0.95)
        np.testing.assert_array_equal(self.prices, before)

    def test_tied_tail_keeps_es_at_least_var(self) -> None:
        prices = np.full(1000, 100.0 * math.exp(0.05 / 3.0) ** 3)
        result = reduce_terminal_prices(prices, 100.0, 0.9)
        self.assertGreaterEqual(result.es, result.var)

    def test_es_not_below_var_for_random_buffers(self) -> None:
        rng = np.random.default_rng(1)
        for _ in range(20):
            prices = rng.lognormal(mean=4.6, sigma=0.3, size=rng.integers(2, 500))
            for level in (0.5, 0.9, 0.95, 0.99):
                result = reduce_terminal_prices(prices, 100.0, level)
                self.assertGreaterEqual(result.es, result.var)

    def test_to_dict_exposes_var_and_es(self) -> None:
        result = RiskResult(var=1.5, es=2.5, confidence_level=0.95, sample_size=10)
        self.assertEqual(result.to_dict(), {'VaR': 1.5, 'ES': 2.5})
        self.assertEqual(result.as_record()['sample_size'], 10)

    def test_rejects_invalid_inputs(self) -> None:
        with self.assertRaises(InvalidParameter):
            reduce_terminal_prices([], 100.0, 0.95)
        with self.assertRaises(InvalidParameter):
            reduce_terminal_prices([1.0, 2.0], 100.0, 1.0)
        with self.assertRaises(InvalidParameter):
            reduce_terminal_prices([1.0, 2.0], 100.0, 0.0)


class AnalyticGbmRiskTests(unittest.TestCase):
    def setUp(self) -> None:
        self.params = ModelParameters(
            initial_price=100.0, drift=0.05, volatility=0.20, horizon=1.0, n_steps=10
        )

    def test_matches_lognormal_quantile_and_tail_mean(self) -> None:
        m = math.log(100.0) + (0.05 - 0.5 * 0.04) * 1.0
        dist_args = dict(s=0.20, scale=math.exp(m))
        for level in (0.90, 0.95, 0.99):
            q = lognorm.ppf(1 - level, **dist_args)
            tail_mean = lognorm.expect(
                lambda x: x, args=(0.20,), scale=math.exp(m), ub=q, conditional=True
            )

            result = analytic_gbm_risk(self.params, level)

            self.assertAlmostEqual(result.var, 100.0 - q, places=6)
            self.assertAlmostEqual(result.es, 100.0 - tail_mean, places=4)
            self.assertEqual(result.method, RiskMethod.ANALYTIC.value)

    def test_es_exceeds_var(self) -> None:
        result = analytic_gbm_risk(self.params, 0.95)
        self.assertGreater(result.es, result.var)
        self.assertGreater(result.var, 0)

    def test_zero_volatility_is_forward_gain(self) -> None:
        params = ModelParameters(100.0, 0.05, 0.0, 2.0, 1)
        result = analytic_gbm_risk(params, 0.95)
        expected = 100.0 - 100.0 * math.exp(0.10)
        self.assertAlmostEqual(result.var, expected)
        self.assertAlmostEqual(result.es, expected)

    def test_rejects_invalid_confidence(self) -> None:
        with self.assertRaises(InvalidParameter):
            analytic_gbm_risk(self.params, 1.2)


if __name__ == "__main__":
    unittest.main()
