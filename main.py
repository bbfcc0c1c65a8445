#!/usr/bin/env python3
"""
Main execution script for the parallel GBM tail-risk simulation.

This script provides the command-line interface for running a timed Monte
Carlo VaR/ES estimate, a confidence-level comparison report, or a
configuration check.

Usage:
    python main.py --help
    python main.py simulate --npaths 1000000 --nsteps 252 --alpha 0.95 --seed 42
    python main.py report --npaths 200000 --levels 0.9 0.95 0.99
    python main.py validate-config
"""

import argparse
import sys

from gbm_risk import (
    BenchmarkRunner,
    InvalidParameter,
    SystemConfig,
    setup_logging,
    get_logger,
)


def parse_arguments(argv=None, config: SystemConfig = None):
    """Parse command line arguments."""

    config = config or SystemConfig()
    sim = config.simulation

    parser = argparse.ArgumentParser(
        description="Parallel Monte Carlo VaR / ES for a GBM asset price",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Timed run on all available CPUs
    python main.py simulate --npaths 1000000 --nsteps 252

    # Sequential baseline with a fixed seed
    python main.py simulate --workers 1 --seed 7

    # Monte Carlo against closed-form figures at several confidence levels
    python main.py report --npaths 200000 --levels 0.9 0.95 0.99

    # Validate configuration
    python main.py validate-config
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_run_arguments(subparser):
        subparser.add_argument(
            '--npaths',
            type=int,
            default=sim.n_paths,
            help=f'Number of Monte Carlo paths (default: {sim.n_paths})'
        )
        subparser.add_argument(
            '--nsteps',
            type=int,
            default=sim.n_steps,
            help=f'Number of time steps per path (default: {sim.n_steps})'
        )
        subparser.add_argument(
            '--seed',
            type=int,
            default=sim.seed,
            help=f'Base random seed; worker w uses seed + w (default: {sim.seed})'
        )
        subparser.add_argument(
            '--workers',
            type=int,
            default=sim.worker_count,
            help=f'Number of parallel workers (default: {sim.worker_count})'
        )
        subparser.add_argument(
            '--executor',
            choices=['thread', 'process'],
            default=sim.executor,
            help=f'Worker pool type (default: {sim.executor})'
        )

    simulate_parser = subparsers.add_parser(
        'simulate',
        help='Run a warm-up and a timed VaR/ES simulation'
    )
    add_run_arguments(simulate_parser)
    simulate_parser.add_argument(
        '--alpha',
        type=float,
        default=config.risk.confidence,
        help=f'Confidence level for VaR/ES (default: {config.risk.confidence})'
    )
    simulate_parser.add_argument(
        '--no-warmup',
        action='store_true',
        help='Skip the untimed warm-up run'
    )

    report_parser = subparsers.add_parser(
        'report',
        help='Compare Monte Carlo and closed-form VaR/ES across confidence levels'
    )
    add_run_arguments(report_parser)
    report_parser.add_argument(
        '--levels',
        type=float,
        nargs='+',
        default=list(config.risk.report_confidence_levels),
        help='Confidence levels to report'
    )

    subparsers.add_parser(
        'validate-config',
        help='Validate system configuration'
    )

    return parser.parse_args(argv)


def run_simulation(args, config: SystemConfig) -> int:
    """Run the warm-up and timed simulation."""

    logger = get_logger(__name__)
    config.simulation.executor = args.executor
    runner = BenchmarkRunner(config)

    print(f"Running Multi-Worker Monte Carlo with {args.workers} {args.executor} worker(s)...")
    print(f"Config: n_paths={args.npaths}, n_steps={args.nsteps}, alpha={args.alpha}")

    try:
        result = runner.run(
            n_paths=args.npaths,
            n_steps=args.nsteps,
            confidence_level=args.alpha,
            seed=args.seed,
            worker_count=args.workers,
            warmup=not args.no_warmup
        )
    except InvalidParameter as e:
        logger.error(f"Invalid simulation parameter: {e}")
        print(f"Error: {e}")
        return 1

    print(f"Results: VaR = {result.risk.var:.4f}, ES = {result.risk.es:.4f}")
    print(f"Completed in {result.elapsed_seconds:.2f} seconds "
          f"({result.paths_per_second:.0f} paths/sec).")
    return 0


def run_report(args, config: SystemConfig) -> int:
    """Print the confidence-level comparison table."""

    logger = get_logger(__name__)
    config.simulation.executor = args.executor
    runner = BenchmarkRunner(config)

    try:
        table = runner.confidence_report(
            n_paths=args.npaths,
            n_steps=args.nsteps,
            seed=args.seed,
            worker_count=args.workers,
            levels=args.levels
        )
    except InvalidParameter as e:
        logger.error(f"Invalid report parameter: {e}")
        print(f"Error: {e}")
        return 1

    print("\n" + "=" * 60)
    print("MONTE CARLO vs CLOSED-FORM GBM TAIL RISK")
    print("=" * 60)
    print(table.to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    print("=" * 60)
    return 0


def validate_configuration(args, config: SystemConfig) -> int:
    """Validate system configuration."""

    validation_result = config.validate_config()

    print("\n" + "=" * 50)
    print("CONFIGURATION VALIDATION")
    print("=" * 50)

    if validation_result['valid']:
        print("Configuration Status: ✓ VALID")
    else:
        print("Configuration Status: ✗ INVALID")

    if validation_result['issues']:
        print("\nIssues Found:")
        for issue in validation_result['issues']:
            print(f"  ✗ {issue}")

    if validation_result['warnings']:
        print("\nWarnings:")
        for warning in validation_result['warnings']:
            print(f"  ⚠ {warning}")

    print("=" * 50)

    return 0 if validation_result['valid'] else 1


def main(argv=None) -> int:
    """Main entry point."""

    config = SystemConfig()
    setup_logging(config)

    args = parse_arguments(argv, config)

    if not args.command:
        print("Error: No command specified. Use --help for available commands.")
        return 1

    if args.command == 'simulate':
        return run_simulation(args, config)
    elif args.command == 'report':
        return run_report(args, config)
    elif args.command == 'validate-config':
        return validate_configuration(args, config)
    else:
        print(f"Error: Unknown command '{args.command}'")
        return 1


if __name__ == "__main__":
    sys.exit(main())
