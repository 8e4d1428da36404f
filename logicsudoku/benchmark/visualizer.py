"""Visualization utilities for batch results."""

from __future__ import annotations
import os
from typing import List

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .batch import BatchResult


class Visualizer:
    """
    Chart generator for batch solving results.

    Shows how much each deduction rule contributed and where the time went.
    """

    # Color palette for outcomes
    COLORS = {
        "solved": "#2ecc71",          # Green
        "stalled": "#f39c12",         # Orange
        "iteration_limit": "#9b59b6", # Purple
        "exhausted": "#3498db",       # Blue
        "contradiction": "#e74c3c",   # Red
        "input_error": "#7f8c8d",     # Grey
        "unsolvable": "#34495e",      # Dark blue
    }

    def __init__(self, results: List[BatchResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of batch results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        # Set style
        plt.style.use('seaborn-v0_8-whitegrid')
        sns.set_palette("husl")

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_rule_effectiveness(),
            self.plot_time_per_puzzle(),
            self.plot_status_counts(),
        ]

    def plot_rule_effectiveness(self) -> str:
        """Stacked bars of productive vs. idle invocations per rule."""
        fig, ax = plt.subplots(figsize=(12, 6))

        rules = []
        for r in self.results:
            for name in r.rule_stats:
                if name not in rules:
                    rules.append(name)

        productive = []
        idle = []
        for name in rules:
            invocations = sum(r.rule_stats.get(name, {}).get("invocations", 0) for r in self.results)
            no_effect = sum(r.rule_stats.get(name, {}).get("no_effect", 0) for r in self.results)
            productive.append(invocations - no_effect)
            idle.append(no_effect)

        x = np.arange(len(rules))
        ax.bar(x, productive, color="#2ecc71", edgecolor='black', linewidth=0.5, label="Changed grid")
        ax.bar(x, idle, bottom=productive, color="#bdc3c7", edgecolor='black', linewidth=0.5, label="No effect")

        ax.set_xticks(x)
        ax.set_xticklabels(rules, rotation=30, ha='right')
        ax.set_xlabel('Rule', fontsize=12)
        ax.set_ylabel('Invocations', fontsize=12)
        ax.set_title('Rule Effectiveness', fontsize=14, fontweight='bold')
        ax.legend()

        plt.tight_layout()
        path = os.path.join(self.output_dir, "rule_effectiveness.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def plot_time_per_puzzle(self) -> str:
        """Bar chart of solve time per puzzle, colored by outcome."""
        fig, ax = plt.subplots(figsize=(12, 6))

        ids = [r.puzzle_id for r in self.results]
        times = [r.time_seconds for r in self.results]
        colors = [self.COLORS.get(r.status, "#95a5a6") for r in self.results]

        ax.bar(ids, times, color=colors, edgecolor='black', linewidth=0.5)

        ax.set_xlabel('Puzzle', fontsize=12)
        ax.set_ylabel('Time (seconds)', fontsize=12)
        ax.set_title('Solve Time per Puzzle', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)

        plt.tight_layout()
        path = os.path.join(self.output_dir, "time_per_puzzle.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path

    def plot_status_counts(self) -> str:
        """Count of puzzles per outcome."""
        fig, ax = plt.subplots(figsize=(8, 6))

        statuses = sorted(set(r.status for r in self.results))
        counts = [sum(1 for r in self.results if r.status == s) for s in statuses]
        colors = [self.COLORS.get(s, "#95a5a6") for s in statuses]

        bars = ax.bar(statuses, counts, color=colors, edgecolor='black', linewidth=0.5)

        # Add value labels on bars
        for bar, count in zip(bars, counts):
            ax.annotate(f'{count}',
                       xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                       xytext=(0, 3),
                       textcoords="offset points",
                       ha='center', va='bottom', fontsize=10)

        ax.set_xlabel('Outcome', fontsize=12)
        ax.set_ylabel('Puzzles', fontsize=12)
        ax.set_title('Outcomes', fontsize=14, fontweight='bold')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "status_counts.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close()

        return path
