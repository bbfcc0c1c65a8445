"""
Configuration management for the GBM tail-risk simulation system.

This module provides centralized configuration for the simulation engine,
including model parameters, Monte Carlo run settings, risk reporting
settings, and logging configuration.
"""

import os
import logging
from typing import Dict, Any, List
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class SimulationConfig:
    """Configuration for Monte Carlo run settings."""

    n_paths: int
    n_steps: int
    seed: int
    worker_count: int
    executor: str = "thread"
    warmup_paths: int = 100
    warmup_steps: int = 10


@dataclass
class ModelConfig:
    """Configuration for the GBM model parameters."""

    initial_price: float
    drift: float
    volatility: float
    horizon: float  # years


@dataclass
class RiskConfig:
    """Configuration for risk reporting parameters."""

    confidence: float
    report_confidence_levels: List[float] = field(
        default_factory=lambda: [0.90, 0.95, 0.99]
    )


class SystemConfig:
    """Centralized configuration management for the entire system."""

    def __init__(self):
        """Initialize configuration from environment variables and defaults."""
        self.project_root = Path(__file__).parent.parent
        self.log_dir = Path(os.getenv('GBM_LOG_DIR', str(self.project_root / "logs")))

        self._setup_simulation_config()
        self._setup_model_config()
        self._setup_risk_config()
        self._setup_logging()

    def _setup_simulation_config(self) -> None:
        """Configure Monte Carlo run settings."""
        self.simulation = SimulationConfig(
            n_paths=int(os.getenv('GBM_N_PATHS', '1000000')),
            n_steps=int(os.getenv('GBM_N_STEPS', '252')),
            seed=int(os.getenv('GBM_SEED', '42')),
            worker_count=int(os.getenv('GBM_WORKERS', str(os.cpu_count() or 1))),
            executor=os.getenv('GBM_EXECUTOR', 'thread').lower(),
            warmup_paths=int(os.getenv('GBM_WARMUP_PATHS', '100')),
            warmup_steps=int(os.getenv('GBM_WARMUP_STEPS', '10'))
        )

    def _setup_model_config(self) -> None:
        """Configure GBM model parameters."""
        self.model = ModelConfig(
            initial_price=float(os.getenv('GBM_S0', '100.0')),
            drift=float(os.getenv('GBM_MU', '0.05')),
            volatility=float(os.getenv('GBM_SIGMA', '0.20')),
            horizon=float(os.getenv('GBM_T', '1.0'))
        )

    def _setup_risk_config(self) -> None:
        """Configure risk reporting parameters."""
        self.risk = RiskConfig(
            confidence=float(os.getenv('GBM_ALPHA', '0.95'))
        )

    def _setup_logging(self) -> None:
        """Configure logging settings."""
        self.logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                },
                'detailed': {
                    'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s',
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': os.getenv('GBM_LOG_LEVEL', 'INFO').upper(),
                    'formatter': 'standard',
                    'stream': 'ext://sys.stderr'
                },
                'file': {
                    'class': 'logging.FileHandler',
                    'level': 'DEBUG',
                    'formatter': 'detailed',
                    'filename': str(self.log_dir / 'gbm_risk.log'),
                    'mode': 'a',
                    'delay': True
                }
            },
            'loggers': {
                '': {
                    'handlers': ['console', 'file'],
                    'level': 'DEBUG',
                    'propagate': False
                }
            }
        }

    def model_parameters(self, n_steps: int = None):
        """Build immutable model parameters from the model configuration."""
        from .risk.parameters import ModelParameters

        return ModelParameters(
            initial_price=self.model.initial_price,
            drift=self.model.drift,
            volatility=self.model.volatility,
            horizon=self.model.horizon,
            n_steps=self.simulation.n_steps if n_steps is None else n_steps
        )

    def validate_config(self) -> Dict[str, Any]:
        """Validate configuration and return any issues."""
        issues = []
        warnings = []

        # Validate model parameters
        if self.model.initial_price <= 0:
            issues.append("Initial price must be positive")

        if self.model.volatility < 0:
            issues.append("Volatility must be non-negative")

        if self.model.horizon <= 0:
            issues.append("Horizon must be positive")

        if self.model.volatility == 0:
            warnings.append("Volatility is zero, every path is deterministic")

        # Validate simulation settings
        if self.simulation.n_paths < 1:
            issues.append("Number of paths must be at least 1")

        if self.simulation.n_steps < 1:
            issues.append("Number of steps must be at least 1")

        if self.simulation.worker_count < 1:
            issues.append("Worker count must be at least 1")

        if self.simulation.executor not in ('thread', 'process'):
            issues.append(f"Unknown executor: {self.simulation.executor}")

        if self.simulation.n_paths < 10000:
            warnings.append("Number of paths is very low, tail estimates may be unreliable")

        cpu_count = os.cpu_count() or 1
        if self.simulation.worker_count > cpu_count:
            warnings.append(
                f"Worker count ({self.simulation.worker_count}) exceeds available CPUs ({cpu_count})"
            )

        # Validate risk parameters
        if self.risk.confidence <= 0 or self.risk.confidence >= 1:
            issues.append("VaR confidence must be between 0 and 1")

        for level in self.risk.report_confidence_levels:
            if level <= 0 or level >= 1:
                issues.append(f"Report confidence level {level} must be between 0 and 1")

        return {
            'valid': len(issues) == 0,
            'issues': issues,
            'warnings': warnings
        }

    def export_config(self) -> Dict[str, Any]:
        """Export current configuration as dictionary."""
        return {
            'simulation': {
                'n_paths': self.simulation.n_paths,
                'n_steps': self.simulation.n_steps,
                'seed': self.simulation.seed,
                'worker_count': self.simulation.worker_count,
                'executor': self.simulation.executor,
                'warmup_paths': self.simulation.warmup_paths,
                'warmup_steps': self.simulation.warmup_steps
            },
            'model': {
                'initial_price': self.model.initial_price,
                'drift': self.model.drift,
                'volatility': self.model.volatility,
                'horizon': self.model.horizon
            },
            'risk': {
                'confidence': self.risk.confidence,
                'report_confidence_levels': list(self.risk.report_confidence_levels)
            }
        }


def setup_logging(config: "SystemConfig" = None) -> None:
    """Setup logging configuration."""
    import logging.config

    config = config or SystemConfig()
    config.log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config.logging_config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)


# Export commonly used items
__all__ = [
    'SystemConfig',
    'SimulationConfig',
    'ModelConfig',
    'RiskConfig',
    'setup_logging',
    'get_logger'
]
