"""
Model parameters and precondition checks for GBM risk simulation.

All checks raise InvalidParameter and run before any simulation work starts.
"""

import math
import numbers
from dataclasses import dataclass


class InvalidParameter(ValueError):
    """Raised when a simulation input violates its precondition."""


@dataclass(frozen=True)
class ModelParameters:
    """Immutable GBM model parameters for one simulation run."""

    initial_price: float  # S0
    drift: float          # mu
    volatility: float     # sigma
    horizon: float        # T in years
    n_steps: int

    def __post_init__(self):
        for name in ('initial_price', 'drift', 'volatility', 'horizon'):
            value = getattr(self, name)
            if not isinstance(value, numbers.Real) or not math.isfinite(value):
                raise InvalidParameter(f"{name} must be a finite number, got {value!r}")

        if self.initial_price <= 0:
            raise InvalidParameter(f"initial_price must be positive, got {self.initial_price}")
        if self.volatility < 0:
            raise InvalidParameter(f"volatility must be non-negative, got {self.volatility}")
        if self.horizon <= 0:
            raise InvalidParameter(f"horizon must be positive, got {self.horizon}")

        # log-return moments must stay finite or paths degenerate to inf - inf
        if not math.isfinite(self.volatility * self.volatility * self.horizon):
            raise InvalidParameter(f"volatility {self.volatility} is too large for horizon {self.horizon}")
        if not math.isfinite(self.drift * self.horizon):
            raise InvalidParameter(f"drift {self.drift} is too large for horizon {self.horizon}")

        validate_count('n_steps', self.n_steps)

    @property
    def dt(self) -> float:
        """Length of one time step."""
        return self.horizon / self.n_steps


def validate_count(name: str, value) -> None:
    """Require a positive integer count (paths, steps, workers)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameter(f"{name} must be at least 1, got {value}")


def validate_confidence(confidence_level) -> None:
    """Require a confidence level strictly inside (0, 1)."""
    if not isinstance(confidence_level, numbers.Real) or not 0 < confidence_level < 1:
        raise InvalidParameter(
            f"confidence level must be strictly between 0 and 1, got {confidence_level!r}"
        )


def validate_seed(seed) -> None:
    """Require a non-negative integer seed."""
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise InvalidParameter(f"seed must be an integer, got {seed!r}")
    if seed < 0:
        raise InvalidParameter(f"seed must be non-negative, got {seed}")
