"""
Risk simulation package.

This package provides the GBM path simulator, the parallel Monte Carlo
aggregator, and the VaR/ES reduction of simulated terminal prices.
"""

from .parameters import ModelParameters, InvalidParameter
from .monte_carlo import (
    ParallelRiskAggregator,
    simulate_path,
    partition_paths,
    create_streams,
    parallelism_warning,
    run_risk_simulation,
)
from .var_calculator import RiskResult, RiskMethod, reduce_terminal_prices, analytic_gbm_risk

__all__ = [
    'ModelParameters',
    'InvalidParameter',
    'ParallelRiskAggregator',
    'simulate_path',
    'partition_paths',
    'create_streams',
    'parallelism_warning',
    'run_risk_simulation',
    'RiskResult',
    'RiskMethod',
    'reduce_terminal_prices',
    'analytic_gbm_risk'
]
