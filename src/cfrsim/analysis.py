"""CFR sampling-variability analysis: statistics and result export."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
from scipy import stats as sp_stats

from .config.settings import SimulationSettings
from .entities import SimulationSet
from .simulation.engine import SeriesRunner

SERIES_FILE = "cfr_series.csv"
STATISTICS_FILE = "cfr_statistics.json"

# Quantiles of the theoretical band around the true CFR
BAND_LOW = 0.05
BAND_HIGH = 0.95


def theoretical_band(case_count: int, cfr: float) -> tuple[float, float]:
    """90% band of the estimated ratio under Binomial(case_count, cfr)."""
    if cfr in (0.0, 1.0):
        return float(cfr), float(cfr)
    low = sp_stats.binom.ppf(BAND_LOW, case_count, cfr) / case_count
    high = sp_stats.binom.ppf(BAND_HIGH, case_count, cfr) / case_count
    return float(low), float(high)


def compute_statistics(simulation: SimulationSet) -> dict[str, Any]:
    """Compute per-scenario summary statistics of the estimated ratio.

    Args:
        simulation: Result of a series run.

    Returns:
        Dictionary with one entry per scenario under "scenarios".
    """
    scenarios = []
    for series in simulation.series:
        ratios = np.array([o.estimated_ratio for o in series.outcomes], dtype=float)
        n = series.case_count
        p = series.cfr
        band_low, band_high = theoretical_band(n, p)
        inside = (ratios >= band_low) & (ratios <= band_high)

        scenarios.append(
            {
                "scenario_index": series.scenario_index,
                "scenario_label": series.label,
                "case_count": n,
                "cfr": p,
                "n_periods": series.period_count,
                "estimated_ratio": {
                    "mean": float(np.mean(ratios)),
                    "std": float(np.std(ratios)),
                    "min": float(np.min(ratios)),
                    "max": float(np.max(ratios)),
                    "median": float(np.median(ratios)),
                    "p5": float(np.percentile(ratios, 5)),
                    "p95": float(np.percentile(ratios, 95)),
                },
                "mean_abs_error": float(np.mean(np.abs(ratios - p))),
                "theoretical_std": math.sqrt(p * (1.0 - p) / n),
                "theoretical_band": {"p5": band_low, "p95": band_high},
                "share_inside_band": float(np.mean(inside)),
            }
        )

    return {
        "n_records": len(simulation),
        "n_scenarios": len(simulation.series),
        "period_count": simulation.series[0].period_count if simulation.series else 0,
        "scenarios": scenarios,
    }


def run_cfr_analysis(
    settings: SimulationSettings,
    verbose: bool = True,
) -> dict[str, Any]:
    """Run the full sampling-variability pipeline.

    Args:
        settings: Validated run settings.
        verbose: Print progress.

    Returns:
        Dictionary with statistics, the SimulationSet and its DataFrame.
    """
    if verbose:
        print(
            f"[CFR] Simulating {settings.period_count} periods for case counts "
            f"{settings.case_counts} (cfr={settings.cfr_by_scenario}, seed={settings.seed})"
        )

    runner = SeriesRunner(seed=settings.seed, max_workers=settings.max_workers)
    simulation = runner.run(
        settings.case_counts, settings.period_count, settings.cfr_by_scenario
    )
    frame = simulation.to_frame()

    stats = compute_statistics(simulation)
    stats["settings"] = settings.describe()

    if verbose:
        print(f"[CFR] Generated {stats['n_records']} records")
        for s in stats["scenarios"]:
            r = s["estimated_ratio"]
            print(
                f"[CFR]   {s['case_count']:>6} cases/day: mean={r['mean']:.3f}, "
                f"std={r['std']:.3f} (theory {s['theoretical_std']:.3f}), "
                f"range=[{r['min']:.3f}, {r['max']:.3f}]"
            )

    if settings.output_dir is not None:
        series_file, stats_file = save_results(frame, stats, settings.output_dir)
        if verbose:
            print(f"[CFR] Series saved to: {series_file}")
            print(f"[CFR] Statistics saved to: {stats_file}")

    return {
        "statistics": stats,
        "simulation": simulation,
        "frame": frame,
    }


def save_results(
    frame: pd.DataFrame, stats: dict[str, Any], output_dir: str | Path
) -> tuple[Path, Path]:
    """Write the series CSV and statistics JSON; returns both paths."""
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    series_file = output_path / SERIES_FILE
    frame.to_csv(series_file, index=False)

    stats_file = output_path / STATISTICS_FILE
    with open(stats_file, "w") as f:
        json.dump(stats, f, indent=2)

    return series_file, stats_file


def load_results(results_dir: str | Path) -> tuple[pd.DataFrame, dict[str, Any]]:
    """Load the series CSV and statistics JSON written by save_results."""
    results_path = Path(results_dir)
    series_file = results_path / SERIES_FILE
    if not series_file.exists():
        raise FileNotFoundError(f"Results file not found: {series_file}")
    frame = pd.read_csv(series_file)
    with open(results_path / STATISTICS_FILE) as f:
        stats = json.load(f)
    return frame, stats
