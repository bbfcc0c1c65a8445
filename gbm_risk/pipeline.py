"""
Benchmark harness for the parallel GBM risk simulation.

This module drives the simulation core the way the command line uses it:
an untimed warm-up run, a timed run with throughput, and a report comparing
Monte Carlo estimates against the closed-form lognormal figures.
"""

import time
import pandas as pd
from typing import Dict, List, Any, Optional
from dataclasses import dataclass

from .config import SystemConfig, get_logger
from .risk import (
    ParallelRiskAggregator,
    RiskResult,
    analytic_gbm_risk,
)


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one timed simulation run."""

    risk: RiskResult
    n_paths: int
    n_steps: int
    worker_count: int
    elapsed_seconds: float
    paths_per_second: float

    def summary(self) -> Dict[str, Any]:
        """Flatten the result for display or export."""
        return {
            'var': self.risk.var,
            'es': self.risk.es,
            'confidence_level': self.risk.confidence_level,
            'n_paths': self.n_paths,
            'n_steps': self.n_steps,
            'worker_count': self.worker_count,
            'elapsed_seconds': self.elapsed_seconds,
            'paths_per_second': self.paths_per_second
        }


class BenchmarkRunner:
    """Runs warm-up and timed simulations from a system configuration."""

    def __init__(self, config: Optional[SystemConfig] = None):
        """
        Initialize the benchmark runner.

        Args:
            config: System configuration (creates default if None)
        """
        self.config = config or SystemConfig()
        self.logger = get_logger(__name__)

    def _aggregator(self, worker_count: int, warn: bool = False) -> ParallelRiskAggregator:
        return ParallelRiskAggregator(
            worker_count=worker_count,
            executor=self.config.simulation.executor,
            on_warning=self.logger.warning if warn else None
        )

    def warm_up(self, confidence_level: float, seed: int, worker_count: int) -> RiskResult:
        """Run a small untimed simulation so the timed run excludes startup cost."""
        sim = self.config.simulation
        params = self.config.model_parameters(sim.warmup_steps)
        self.logger.debug(f"Warm-up run: {sim.warmup_paths} paths x {sim.warmup_steps} steps")
        return self._aggregator(worker_count).run(params, sim.warmup_paths, confidence_level, seed)

    def run(self,
            n_paths: Optional[int] = None,
            n_steps: Optional[int] = None,
            confidence_level: Optional[float] = None,
            seed: Optional[int] = None,
            worker_count: Optional[int] = None,
            warmup: bool = True) -> BenchmarkResult:
        """
        Execute a warm-up run followed by a timed run.

        Unspecified arguments fall back to the configuration.

        Returns:
            Benchmark result with risk figures and throughput
        """
        sim = self.config.simulation
        n_paths = sim.n_paths if n_paths is None else n_paths
        n_steps = sim.n_steps if n_steps is None else n_steps
        confidence_level = self.config.risk.confidence if confidence_level is None else confidence_level
        seed = sim.seed if seed is None else seed
        worker_count = sim.worker_count if worker_count is None else worker_count

        params = self.config.model_parameters(n_steps)
        aggregator = self._aggregator(worker_count, warn=True)

        if warmup:
            self.warm_up(confidence_level, seed, worker_count)

        self.logger.info(
            f"Running {n_paths:,} paths x {n_steps} steps on {worker_count} worker(s)"
        )

        start = time.perf_counter()
        risk = aggregator.run(params, n_paths, confidence_level, seed)
        elapsed = time.perf_counter() - start

        paths_per_second = n_paths / elapsed if elapsed > 0 else float('inf')
        self.logger.info(f"Completed in {elapsed:.2f}s ({paths_per_second:,.0f} paths/sec)")

        return BenchmarkResult(
            risk=risk,
            n_paths=n_paths,
            n_steps=n_steps,
            worker_count=worker_count,
            elapsed_seconds=elapsed,
            paths_per_second=paths_per_second
        )

    def confidence_report(self,
                          n_paths: Optional[int] = None,
                          n_steps: Optional[int] = None,
                          seed: Optional[int] = None,
                          worker_count: Optional[int] = None,
                          levels: Optional[List[float]] = None) -> pd.DataFrame:
        """
        Compare Monte Carlo and closed-form VaR/ES across confidence levels.

        Each level gets its own full run with the same seed and worker count.

        Returns:
            DataFrame with one row per confidence level
        """
        sim = self.config.simulation
        n_paths = sim.n_paths if n_paths is None else n_paths
        n_steps = sim.n_steps if n_steps is None else n_steps
        seed = sim.seed if seed is None else seed
        worker_count = sim.worker_count if worker_count is None else worker_count
        levels = list(self.config.risk.report_confidence_levels if levels is None else levels)

        params = self.config.model_parameters(n_steps)
        aggregator = self._aggregator(worker_count)

        rows = []
        for level in levels:
            self.logger.info(f"Report run at confidence {level}")
            mc = aggregator.run(params, n_paths, level, seed)
            exact = analytic_gbm_risk(params, level)
            rows.append({
                'confidence': level,
                'mc_var': mc.var,
                'mc_es': mc.es,
                'analytic_var': exact.var,
                'analytic_es': exact.es
            })

        return pd.DataFrame(rows, columns=['confidence', 'mc_var', 'mc_es',
                                           'analytic_var', 'analytic_es'])
