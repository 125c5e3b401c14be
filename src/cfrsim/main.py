#!/usr/bin/env python3
"""
CFR Sampling Variability - Main Pipeline Entry Point.

Usage:
    cfrsim                                   # Tutorial defaults (5/10/100 cases, 90 days, CFR 0.2)
    cfrsim --case-counts 5 50 500            # Custom daily case volumes
    cfrsim --cfr 0.1 0.2 0.3                 # One CFR per case count
    cfrsim --periods 365 --seed 7            # Longer series, other seed
    cfrsim --config run.yaml --output results/run1
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from .analysis import run_cfr_analysis
from .config.settings import DEFAULTS_PATH, SimulationSettings
from .exceptions import UpstreamFailure
from .utils import ConfigTracker, load_config_from_file, settings_from_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Simulate how sampling variability affects CFR estimates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cfrsim --case-counts 5 10 100 --periods 90 --cfr 0.2
  cfrsim --config run.yaml --output results/low_volume
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to run YAML file (default: {DEFAULTS_PATH.name} in the package)",
    )

    parser.add_argument(
        "--case-counts",
        type=int,
        nargs="+",
        default=None,
        help="Daily case counts, one scenario each (default: from config)",
    )

    parser.add_argument(
        "--periods",
        type=int,
        default=None,
        help="Number of simulated periods per scenario (default: from config)",
    )

    parser.add_argument(
        "--cfr",
        type=float,
        nargs="+",
        default=None,
        help="True CFR, shared or one per case count (default: from config)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: from config)",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used to run scenarios (default: from config)",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for results (default: <config output.dir>/<timestamp>)",
    )

    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Print statistics only, do not write result files",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def create_settings(args: argparse.Namespace, config: ConfigTracker) -> SimulationSettings:
    """
    Create SimulationSettings from the run file and command line overrides.

    Raises:
        InvalidParameter: If a value is outside its allowed domain
        KeyError: If the run file misses a required key
    """
    # A single --cfr value is shared by every scenario
    cfr = args.cfr
    if cfr is not None and len(cfr) == 1:
        cfr = cfr[0]

    settings = settings_from_config(
        config,
        overrides={
            "case_counts": args.case_counts,
            "period_count": args.periods,
            "cfr": cfr,
            "seed": args.seed,
            "max_workers": args.workers,
        },
    )

    # Determine output directory
    if args.no_save:
        settings.output_dir = None
    elif args.output:
        settings.output_dir = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = settings.output_dir if settings.output_dir is not None else Path("results")
        settings.output_dir = base / timestamp

    return settings


def run_pipeline(
    settings: SimulationSettings,
    config: ConfigTracker | None = None,
    verbose: bool = False,
) -> dict:
    """
    Run the simulation and analysis pipeline.

    Args:
        settings: Simulation settings (REQUIRED)
        config: Loaded run file, audited for unused keys when verbose
        verbose: Enable verbose output

    Returns:
        Result dictionary from run_cfr_analysis
    """
    if settings is None:
        raise ValueError("settings is REQUIRED")

    if verbose:
        print("=" * 60)
        print("CFR Sampling Variability")
        print("=" * 60)
        print(f"Case counts: {settings.case_counts}")
        print(f"Periods: {settings.period_count}")
        print(f"CFR: {settings.cfr_by_scenario}")
        print(f"Seed: {settings.seed}")
        print(f"Workers: {settings.max_workers}")
        print(f"Output: {settings.output_dir}")
        print("=" * 60)

    try:
        return run_cfr_analysis(settings, verbose=verbose)
    finally:
        if verbose and config is not None:
            print("\n[Audit] Checking for unused configuration parameters...")
            config.report_unused()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config_from_file(args.config)
        settings = create_settings(args, config)
        result = run_pipeline(settings=settings, config=config, verbose=args.verbose)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (ValueError, KeyError) as e:
        # InvalidParameter is a ValueError
        print(f"Configuration error: {e}", file=sys.stderr)
        return 3
    except UpstreamFailure as e:
        print(f"Random source error: {e}", file=sys.stderr)
        return 4

    if not args.verbose:
        for s in result["statistics"]["scenarios"]:
            r = s["estimated_ratio"]
            print(
                f"{s['case_count']} cases/day: mean={r['mean']:.3f} "
                f"std={r['std']:.3f} min={r['min']:.3f} max={r['max']:.3f}"
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
