"""
Monte Carlo simulation engine for GBM terminal-price tail risk.

This module simulates independent Geometric Brownian Motion paths across a
fixed pool of workers, each owning its own seeded random stream, and reduces
the terminal prices into Value-at-Risk and Expected Shortfall.
"""

import os
import math
import numpy as np
from typing import Callable, Dict, List, Optional
import concurrent.futures

from ..config import get_logger
from .parameters import (
    ModelParameters,
    InvalidParameter,
    validate_count,
    validate_confidence,
    validate_seed,
)
from .var_calculator import RiskResult, reduce_terminal_prices

EXECUTORS = ('thread', 'process')


def simulate_path(params: ModelParameters, stream: np.random.Generator) -> float:
    """
    Simulate one GBM path and return its terminal price.

    Uses the exact lognormal transition over n_steps intervals of length
    dt = T / n_steps:
        S <- S * exp((mu - sigma^2/2) dt + sigma sqrt(dt) z)
    with one standard-normal draw z per step taken from ``stream``. The
    step drifts are accumulated as (mu - sigma^2/2) T, so a zero-volatility
    path ends at exactly S0 * exp(mu T) for any step count.

    Args:
        params: Validated model parameters
        stream: Random stream owned exclusively by the calling worker

    Returns:
        Non-negative terminal price
    """
    drift = (params.drift - 0.5 * params.volatility ** 2) * params.horizon
    diffusion = params.volatility * math.sqrt(params.dt)

    shocks = stream.standard_normal(params.n_steps)
    log_return = drift + diffusion * float(np.sum(shocks))

    try:
        growth = math.exp(log_return)
    except OverflowError:
        # same saturation np.exp gives
        growth = math.inf

    return params.initial_price * growth


def partition_paths(n_paths: int, worker_count: int) -> List[range]:
    """
    Split [0, n_paths) into ``worker_count`` contiguous blocks.

    The first ``n_paths % worker_count`` blocks get one extra path and
    workers beyond ``n_paths`` get empty blocks, so every index belongs to
    exactly one block.
    """
    validate_count('n_paths', n_paths)
    validate_count('worker_count', worker_count)

    base, extra = divmod(n_paths, worker_count)
    blocks = []
    start = 0
    for worker in range(worker_count):
        size = base + (1 if worker < extra else 0)
        blocks.append(range(start, start + size))
        start += size
    return blocks


def create_streams(seed: int, worker_count: int) -> List[np.random.Generator]:
    """Create one independent random stream per worker, seeded seed + w."""
    return [np.random.default_rng(seed + worker) for worker in range(worker_count)]


def parallelism_warning(worker_count: int, available: Optional[int] = None) -> Optional[str]:
    """Describe under-used hardware parallelism, or return None."""
    if available is None:
        available = os.cpu_count() or 1
    if worker_count == 1 and available > 1:
        return (
            f"Running on a single worker while {available} CPUs are available. "
            f"Increase the worker count for parallel execution."
        )
    return None


def _fill_block(params: ModelParameters,
                stream: np.random.Generator,
                buffer: np.ndarray,
                block: range) -> int:
    """Write one terminal price into each buffer slot of ``block``."""
    for index in block:
        buffer[index] = simulate_path(params, stream)
    return len(block)


def _simulate_block(params: ModelParameters,
                    stream: np.random.Generator,
                    size: int) -> np.ndarray:
    """Simulate ``size`` paths into a private chunk (process workers)."""
    chunk = np.empty(size, dtype=np.float64)
    for offset in range(size):
        chunk[offset] = simulate_path(params, stream)
    return chunk


class ParallelRiskAggregator:
    """Fans GBM path simulation out over a worker pool and reduces the result."""

    def __init__(self,
                 worker_count: Optional[int] = None,
                 executor: str = 'thread',
                 on_warning: Optional[Callable[[str], None]] = None):
        """
        Initialize the aggregator.

        Args:
            worker_count: Number of workers (defaults to available CPUs)
            executor: 'thread' or 'process'
            on_warning: Optional callback receiving operational warnings
        """
        if worker_count is None:
            worker_count = os.cpu_count() or 1

        validate_count('worker_count', worker_count)
        if executor not in EXECUTORS:
            raise InvalidParameter(f"Unsupported executor: {executor!r}")

        self.worker_count = worker_count
        self.executor = executor
        self.on_warning = on_warning
        self.logger = get_logger(__name__)

    def run(self,
            params: ModelParameters,
            n_paths: int,
            confidence_level: float,
            seed: int) -> RiskResult:
        """
        Simulate ``n_paths`` independent paths and reduce them to VaR/ES.

        Results are reproducible for a fixed worker count and seed. Changing
        the worker count changes which stream services which path, and so
        changes the draws.

        Args:
            params: Model parameters
            n_paths: Number of independent paths
            confidence_level: Confidence level in (0, 1)
            seed: Base seed; worker w uses seed + w

        Returns:
            Risk result for this run
        """
        if not isinstance(params, ModelParameters):
            raise InvalidParameter(f"params must be ModelParameters, got {type(params).__name__}")
        validate_count('n_paths', n_paths)
        validate_confidence(confidence_level)
        validate_seed(seed)

        if self.on_warning is not None:
            message = parallelism_warning(self.worker_count)
            if message:
                self.on_warning(message)

        buffer = self._allocate_buffer(n_paths)
        streams = create_streams(seed, self.worker_count)
        blocks = partition_paths(n_paths, self.worker_count)

        self.logger.debug(
            f"Simulating {n_paths} paths x {params.n_steps} steps on "
            f"{self.worker_count} {self.executor} worker(s), seed={seed}"
        )

        if self.worker_count == 1:
            _fill_block(params, streams[0], buffer, blocks[0])
        elif self.executor == 'thread':
            self._simulate_threaded(params, streams, buffer, blocks)
        else:
            self._simulate_processes(params, streams, buffer, blocks)

        if np.isnan(buffer).any():
            raise RuntimeError(
                "Terminal price buffer holds NaN after simulation "
                "(unwritten slot or non-numeric terminal price)"
            )

        result = reduce_terminal_prices(buffer, params.initial_price, confidence_level)
        self.logger.debug(f"Run complete: VaR={result.var:.6f}, ES={result.es:.6f}")
        return result

    @staticmethod
    def _allocate_buffer(n_paths: int) -> np.ndarray:
        """Pre-allocate the terminal price buffer; NaN marks unwritten slots."""
        return np.full(n_paths, np.nan, dtype=np.float64)

    def _simulate_threaded(self,
                           params: ModelParameters,
                           streams: List[np.random.Generator],
                           buffer: np.ndarray,
                           blocks: List[range]) -> None:
        """Workers write directly into disjoint slices of the shared buffer."""
        active = [w for w, block in enumerate(blocks) if len(block) > 0]

        with concurrent.futures.ThreadPoolExecutor(max_workers=len(active)) as pool:
            future_to_worker = {
                pool.submit(_fill_block, params, streams[w], buffer, blocks[w]): w
                for w in active
            }

            for future in concurrent.futures.as_completed(future_to_worker):
                written = future.result()
                self.logger.debug(
                    f"Worker {future_to_worker[future]} wrote {written} paths"
                )

    def _simulate_processes(self,
                            params: ModelParameters,
                            streams: List[np.random.Generator],
                            buffer: np.ndarray,
                            blocks: List[range]) -> None:
        """Workers return private chunks that are copied into disjoint slices."""
        active = [w for w, block in enumerate(blocks) if len(block) > 0]

        with concurrent.futures.ProcessPoolExecutor(max_workers=len(active)) as pool:
            future_to_worker = {
                pool.submit(_simulate_block, params, streams[w], len(blocks[w])): w
                for w in active
            }

            for future in concurrent.futures.as_completed(future_to_worker):
                block = blocks[future_to_worker[future]]
                buffer[block.start:block.stop] = future.result()


def run_risk_simulation(n_paths: int,
                        n_steps: int,
                        initial_price: float,
                        drift: float,
                        volatility: float,
                        horizon: float,
                        confidence_level: float,
                        seed: int,
                        worker_count: Optional[int] = None,
                        executor: str = 'thread',
                        on_warning: Optional[Callable[[str], None]] = None) -> Dict[str, float]:
    """
    Estimate VaR and ES of the GBM terminal price by parallel Monte Carlo.

    Every argument is validated before any buffer is allocated or any
    worker starts.

    Returns:
        Dictionary with 'VaR' and 'ES'
    """
    params = ModelParameters(
        initial_price=initial_price,
        drift=drift,
        volatility=volatility,
        horizon=horizon,
        n_steps=n_steps
    )
    aggregator = ParallelRiskAggregator(worker_count, executor, on_warning)
    return aggregator.run(params, n_paths, confidence_level, seed).to_dict()
