import os
import unittest
from unittest.mock import patch

from gbm_risk.config import SystemConfig
from gbm_risk.risk.parameters import ModelParameters


class SystemConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = SystemConfig()
        self.assertEqual(config.simulation.n_paths, 1000000)
        self.assertEqual(config.simulation.n_steps, 252)
        self.assertEqual(config.simulation.seed, 42)
        self.assertEqual(config.simulation.executor, 'thread')
        self.assertEqual(config.model.initial_price, 100.0)
        self.assertEqual(config.model.drift, 0.05)
        self.assertEqual(config.model.volatility, 0.20)
        self.assertEqual(config.model.horizon, 1.0)
        self.assertEqual(config.risk.confidence, 0.95)
        self.assertEqual(config.risk.report_confidence_levels, [0.90, 0.95, 0.99])

    def test_environment_overrides(self) -> None:
        env = {
            'GBM_N_PATHS': '5000',
            'GBM_N_STEPS': '12',
            'GBM_WORKERS': '3',
            'GBM_EXECUTOR': 'PROCESS',
            'GBM_SIGMA': '0.35',
            'GBM_ALPHA': '0.99',
        }
        with patch.dict(os.environ, env):
            config = SystemConfig()
        self.assertEqual(config.simulation.n_paths, 5000)
        self.assertEqual(config.simulation.n_steps, 12)
        self.assertEqual(config.simulation.worker_count, 3)
        self.assertEqual(config.simulation.executor, 'process')
        self.assertEqual(config.model.volatility, 0.35)
        self.assertEqual(config.risk.confidence, 0.99)

    def test_model_parameters(self) -> None:
        config = SystemConfig()
        params = config.model_parameters(n_steps=5)
        self.assertIsInstance(params, ModelParameters)
        self.assertEqual(params.n_steps, 5)
        self.assertEqual(config.model_parameters().n_steps, config.simulation.n_steps)

    def test_validate_default_config(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            result = SystemConfig().validate_config()
        self.assertTrue(result['valid'])
        self.assertEqual(result['issues'], [])

    def test_validate_reports_issues_and_warnings(self) -> None:
        config = SystemConfig()
        config.model.volatility = -0.1
        config.risk.confidence = 1.0
        config.simulation.executor = 'gpu'
        config.simulation.n_paths = 100

        result = config.validate_config()

        self.assertFalse(result['valid'])
        self.assertIn("Volatility must be non-negative", result['issues'])
        self.assertIn("VaR confidence must be between 0 and 1", result['issues'])
        self.assertIn("Unknown executor: gpu", result['issues'])
        self.assertTrue(any("very low" in w for w in result['warnings']))

    def test_export_config(self) -> None:
        exported = SystemConfig().export_config()
        self.assertEqual(set(exported), {'simulation', 'model', 'risk'})
        self.assertIn('worker_count', exported['simulation'])

    def test_construction_creates_no_directories(self) -> None:
        with patch('pathlib.Path.mkdir') as mkdir:
            SystemConfig()
        mkdir.assert_not_called()


if __name__ == "__main__":
    unittest.main()
