#!/usr/bin/env python3
"""Plot CFR estimate fluctuations around the true CFR.

Left: estimated ratio per period for every scenario, with the true CFR and the
theoretical 90% band. Right: distribution of the estimated ratio per scenario.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from cfrsim.analysis import load_results


def main():
    parser = argparse.ArgumentParser(
        description="Plot estimated CFR per period for each daily case count"
    )
    parser.add_argument(
        "--results", required=True, help="Path to a cfrsim results directory"
    )
    parser.add_argument("--output", default=None, help="Output file path")
    args = parser.parse_args()

    results_dir = Path(args.results)
    try:
        df, stats = load_results(results_dir)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    scenarios = stats["scenarios"]
    colors = plt.cm.viridis(np.linspace(0.1, 0.85, len(scenarios)))

    fig, (ax1, ax2) = plt.subplots(
        1, 2, figsize=(14, 5), gridspec_kw={"width_ratios": [3, 1]}
    )

    # ===== Left: Estimated ratio over time =====
    for color, s in zip(colors, scenarios):
        group = df[df["scenario_index"] == s["scenario_index"]]
        label = f"{s['case_count']} cases/day"
        ax1.plot(
            group["period_index"],
            group["estimated_ratio"],
            color=color,
            linewidth=1.2,
            alpha=0.85,
            label=label,
        )
        band = s["theoretical_band"]
        ax1.axhspan(band["p5"], band["p95"], color=color, alpha=0.08)

    cfrs = sorted({s["cfr"] for s in scenarios})
    for cfr in cfrs:
        ax1.axhline(
            y=cfr,
            color="black",
            linestyle="--",
            linewidth=1.5,
            label=f"True CFR ({cfr:.2f})",
        )

    ax1.set_xlabel("Day", fontsize=12)
    ax1.set_ylabel("Estimated CFR (deaths / cases)", fontsize=12)
    ax1.set_title("Daily CFR Estimates by Case Volume", fontsize=14)
    ax1.set_ylim(-0.02, 1.02)
    ax1.legend(loc="upper right", fontsize=9)
    ax1.grid(True, alpha=0.3)

    # ===== Right: Distribution per scenario =====
    data = [
        df[df["scenario_index"] == s["scenario_index"]]["estimated_ratio"].values
        for s in scenarios
    ]
    parts = ax2.boxplot(data, patch_artist=True, widths=0.6)
    for patch, color in zip(parts["boxes"], colors):
        patch.set_facecolor(color)
        patch.set_alpha(0.6)
    for cfr in cfrs:
        ax2.axhline(y=cfr, color="black", linestyle="--", linewidth=1.5)

    ax2.set_xticks(range(1, len(scenarios) + 1))
    ax2.set_xticklabels([str(s["case_count"]) for s in scenarios])
    ax2.set_xlabel("Cases per day", fontsize=12)
    ax2.set_title("Spread of Estimates", fontsize=14)
    ax2.set_ylim(-0.02, 1.02)
    ax2.grid(True, alpha=0.3)

    # Output
    output_path = args.output
    if output_path is None:
        figures_dir = results_dir / "figures"
        figures_dir.mkdir(exist_ok=True)
        output_path = figures_dir / "cfr_series.png"

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    print(f"Saved: {output_path}")
    plt.close()
    return 0


if __name__ == "__main__":
    exit(main())
