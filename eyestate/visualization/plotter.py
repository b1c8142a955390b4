"""
Visualization Utilities
=======================

Diagnostic plots for model selection runs.

"""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from typing import Dict, List, Optional, Union
from pathlib import Path

from ..metrics.evaluator import ConfusionMatrix
from ..tuning.grid_search import ModelResult

CLASS_NAMES = ['Open (0)', 'Closed (1)']


class Plotter:
    """Handles core plotting functionality."""

    def __init__(self):
        """Initialize plotter with default settings."""
        try:
            plt.style.use('seaborn-v0_8-darkgrid')
        except OSError:
            plt.style.use('default')

        plt.rcParams['figure.figsize'] = (10, 6)
        plt.rcParams['font.size'] = 10
        plt.rcParams['axes.labelsize'] = 12
        plt.rcParams['axes.titlesize'] = 14

        self.colors = {
            'primary': '#1f77b4',
            'secondary': '#ff7f0e',
            'success': '#2ca02c',
            'danger': '#d62728',
        }

    def save_and_close(self, save_path: Optional[Union[str, Path]] = None) -> None:
        """Save figure and close it."""
        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight', facecolor='white')
        plt.close()

    def plot_confusion_matrix(self,
                            cm: ConfusionMatrix,
                            labels: Optional[List[str]] = None,
                            title: str = 'Confusion Matrix',
                            save_path: Optional[Union[str, Path]] = None) -> None:
        """Plot confusion matrix heatmap with counts and row percentages."""
        labels = labels or CLASS_NAMES
        counts = cm.counts

        plt.figure(figsize=(8, 6))

        row_sums = counts.sum(axis=1, keepdims=True)
        row_sums[row_sums == 0] = 1
        cm_normalized = counts / row_sums

        annotations = np.empty(counts.shape, dtype=object)
        for i in range(counts.shape[0]):
            for j in range(counts.shape[1]):
                annotations[i, j] = f'{counts[i, j]}\n({cm_normalized[i, j]:.1%})'

        sns.heatmap(counts, annot=annotations, fmt='', cmap='Blues',
                    xticklabels=labels, yticklabels=labels,
                    cbar_kws={'label': 'Count'}, square=True)

        plt.title(f'{title} (error rate {cm.error_rate:.3f})', fontsize=16, fontweight='bold', pad=20)
        plt.ylabel('True Label', fontsize=12)
        plt.xlabel('Predicted Label', fontsize=12)
        plt.tight_layout()

        self.save_and_close(save_path)

    def plot_cv_errors(self,
                       model_result: ModelResult,
                       title: Optional[str] = None,
                       save_path: Optional[Union[str, Path]] = None) -> None:
        """Mean CV error per grid point with fold spread; the winner is highlighted."""
        df = model_result.cv_results_frame()
        ok = df[df['status'] == 'ok']
        if ok.empty:
            return

        param_cols = list(model_result.params)
        tick_labels = [', '.join(f'{p}={row[p]:g}' for p in param_cols) for _, row in ok.iterrows()]
        x_pos = np.arange(len(ok))

        plt.figure(figsize=(max(8, len(ok) * 0.6), 6))
        plt.errorbar(x_pos, ok['mean_error'], yerr=ok['std_error'], fmt='o-',
                     color=self.colors['primary'], capsize=4, linewidth=2)

        best = ok['mean_error'].to_numpy().argmin()
        plt.scatter([x_pos[best]], [ok['mean_error'].iloc[best]], s=150,
                    color=self.colors['danger'], zorder=5, label='Selected')

        plt.xticks(x_pos, tick_labels, rotation=45, ha='right')
        plt.ylabel(f'Mean {model_result.n_folds}-fold CV error', fontsize=12, fontweight='bold')
        plt.title(title or f'Grid search: {model_result.strategy_name}', fontsize=16, fontweight='bold', pad=20)
        plt.legend(loc='best')
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        self.save_and_close(save_path)

    def plot_label_distribution(self,
                                distribution: Dict[int, int],
                                title: str = 'Predicted Label Distribution',
                                save_path: Optional[Union[str, Path]] = None) -> None:
        """Bar chart of predicted class counts."""
        if not distribution:
            return

        plt.figure(figsize=(6, 5))
        values = [distribution.get(label, 0) for label in (0, 1)]
        bars = plt.bar(CLASS_NAMES, values, color=[self.colors['success'], self.colors['secondary']],
                       edgecolor='black', linewidth=1.2)

        for bar, value in zip(bars, values):
            plt.text(bar.get_x() + bar.get_width()/2, bar.get_height(),
                     f'{value}', ha='center', va='bottom', fontsize=10, fontweight='bold')

        plt.ylabel('Records', fontsize=12, fontweight='bold')
        plt.title(title, fontsize=16, fontweight='bold', pad=20)
        plt.tight_layout()

        self.save_and_close(save_path)
