"""
GBM Tail-Risk Simulation Package

Estimates Value-at-Risk and Expected Shortfall of a terminal asset price
under Geometric Brownian Motion by Monte Carlo simulation executed in
parallel across independent paths.

This package provides:
- Exact-transition GBM path simulation
- Parallel path aggregation with per-worker seeded random streams
- Percentile-based VaR / ES reduction and closed-form benchmarks
- A benchmark harness with warm-up and throughput reporting

Example usage:
    from gbm_risk import run_risk_simulation

    risks = run_risk_simulation(
        n_paths=100_000, n_steps=10,
        initial_price=100.0, drift=0.05, volatility=0.20, horizon=1.0,
        confidence_level=0.95, seed=42, worker_count=4
    )
    print(risks['VaR'], risks['ES'])
"""

from .config import SystemConfig, setup_logging, get_logger
from .risk import (
    ModelParameters,
    InvalidParameter,
    ParallelRiskAggregator,
    RiskResult,
    simulate_path,
    run_risk_simulation,
    reduce_terminal_prices,
    analytic_gbm_risk,
)
from .pipeline import BenchmarkRunner, BenchmarkResult

__version__ = "1.0.0"

__all__ = [
    # Configuration
    'SystemConfig',
    'setup_logging',
    'get_logger',

    # Simulation core
    'ModelParameters',
    'InvalidParameter',
    'ParallelRiskAggregator',
    'RiskResult',
    'simulate_path',
    'run_risk_simulation',
    'reduce_terminal_prices',
    'analytic_gbm_risk',

    # Benchmark harness
    'BenchmarkRunner',
    'BenchmarkResult'
]
