"""
Value-at-Risk (VaR) and Expected Shortfall calculation module.

This module reduces a buffer of simulated terminal prices into tail-risk
statistics, and provides the closed-form lognormal figures for the same
GBM model as a benchmark for the Monte Carlo estimates.
"""

import math
import numpy as np
from typing import Dict
from dataclasses import dataclass, asdict
from enum import Enum
from scipy.stats import norm

from .parameters import ModelParameters, validate_confidence, InvalidParameter

# Decimal places (1 - alpha) * n is rounded to before taking the ceiling
TAIL_COUNT_DECIMALS = 9


class RiskMethod(Enum):
    """Methods used to produce a risk result."""
    MONTE_CARLO = "monte_carlo"
    ANALYTIC = "analytic_lognormal"


@dataclass(frozen=True)
class RiskResult:
    """Tail-risk statistics of the terminal price, expressed as losses."""

    var: float
    es: float
    confidence_level: float
    sample_size: int
    method: str = RiskMethod.MONTE_CARLO.value

    def to_dict(self) -> Dict[str, float]:
        """Return the {VaR, ES} pair handed back to callers."""
        return {'VaR': self.var, 'ES': self.es}

    def as_record(self) -> Dict[str, object]:
        """Return every field, for tabular reports."""
        return asdict(self)


def tail_count(n_paths: int, confidence_level: float) -> int:
    """
    Number of worst paths in the (1 - alpha) lower tail.

    k = ceil((1 - alpha) * n), clamped to [1, n] so that at least the
    single worst path contributes. The product is rounded to
    TAIL_COUNT_DECIMALS places first: (1 - 0.95) * 100 evaluates to
    5.000000000000004 in binary floating point and must give k = 5, not 6.
    """
    k = math.ceil(round((1.0 - confidence_level) * n_paths, TAIL_COUNT_DECIMALS))
    return min(max(k, 1), n_paths)


def reduce_terminal_prices(prices: np.ndarray,
                           initial_price: float,
                           confidence_level: float) -> RiskResult:
    """
    Reduce a completed terminal price buffer into VaR and ES.

    The buffer is sorted ascending; VaR is the loss at the k-th worst
    price and ES is the mean loss over the k worst prices.

    Args:
        prices: Completed buffer of simulated terminal prices
        initial_price: Starting price S0 the losses are measured against
        confidence_level: Confidence level (e.g., 0.95 for 95% VaR)

    Returns:
        Risk result with VaR and ES as positive-when-losing figures
    """
    validate_confidence(confidence_level)

    prices = np.asarray(prices, dtype=np.float64)
    if prices.ndim != 1 or prices.size == 0:
        raise InvalidParameter("Terminal price buffer must be a non-empty 1-D array")

    sorted_prices = np.sort(prices)
    k = tail_count(sorted_prices.size, confidence_level)

    var_value = float(initial_price - sorted_prices[k - 1])
    tail_losses = initial_price - sorted_prices[:k]
    es_value = float(np.mean(tail_losses))

    # the tail mean can round below its own maximum when all k values tie
    es_value = max(es_value, var_value)

    return RiskResult(
        var=var_value,
        es=es_value,
        confidence_level=confidence_level,
        sample_size=int(sorted_prices.size)
    )


def analytic_gbm_risk(params: ModelParameters, confidence_level: float) -> RiskResult:
    """
    Closed-form VaR and ES of the lognormal GBM terminal price.

    ln S_T ~ N(ln S0 + (mu - sigma^2/2) T, sigma^2 T), so with
    z = Phi^-1(1 - alpha) and s = sigma sqrt(T):
        VaR = S0 - exp(m + s z)
        ES  = S0 - S0 exp(mu T) Phi(z - s) / (1 - alpha)
    """
    validate_confidence(confidence_level)

    s0 = params.initial_price
    tail_prob = 1.0 - confidence_level
    s = params.volatility * math.sqrt(params.horizon)
    forward = s0 * math.exp(params.drift * params.horizon)

    if s == 0:
        # Degenerate distribution: every path ends at the forward price
        var_value = es_value = s0 - forward
    else:
        m = math.log(s0) + (params.drift - 0.5 * params.volatility ** 2) * params.horizon
        z = norm.ppf(tail_prob)
        var_value = s0 - math.exp(m + s * z)
        es_value = s0 - forward * norm.cdf(z - s) / tail_prob

    return RiskResult(
        var=float(var_value),
        es=float(es_value),
        confidence_level=confidence_level,
        sample_size=0,
        method=RiskMethod.ANALYTIC.value
    )
