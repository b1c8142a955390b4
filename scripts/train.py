#!/usr/bin/env python3
"""
Eye-State Model Selection Runner
================================

Reads a YAML configuration, runs the model-selection pipeline for every
enabled classifier and writes CV tables, predictions, summaries and plots.

"""
import argparse
import json
import sys
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional
import logging

import pandas as pd
from loguru import logger

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from eyestate.data import DataLoader
from eyestate.models import ModelFactory
from eyestate.pipeline import EyeStatePipeline, PipelineResult
from eyestate.utils import Config


class EyeStateTrainer:
    """Runs the pipeline for each enabled model in a configuration."""

    def __init__(self, config_path: str, models: Optional[List[str]] = None):
        """Initialize trainer with configuration file."""
        self.config_path = Path(config_path)
        self.project_root = Path(__file__).parent.parent
        self.config = Config(self.config_path)

        self.experiment_name = self._create_experiment_name()
        self.model_names = models or self.config.get_model_names()
        self.results: Dict[str, PipelineResult] = {}
        self.failures: Dict[str, str] = {}

        output_dir = self.config.get_output_config().get('output_dir', 'results')
        self.output_dir = self.project_root / output_dir / self.experiment_name

        logger.info(f"Initialized trainer - Experiment: {self.experiment_name}")

    def _create_experiment_name(self) -> str:
        """Create unique experiment identifier."""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"{self.config_path.stem}_{timestamp}"

    def run(self) -> int:
        """Execute every configured pipeline; returns the number of failures."""
        logger.info("=" * 80)
        logger.info("EYE-STATE MODEL SELECTION")
        logger.info("=" * 80)
        logger.info(f"Configuration: {self.config_path.name}")
        logger.info(f"Models: {', '.join(self.model_names)}")

        data_config = self.config.get_data_config()
        labeled, unlabeled = DataLoader().load_from_config(data_config, self.project_root)

        cv_config = self.config.get_cv_config()
        for idx, name in enumerate(self.model_names, 1):
            logger.info(f"\n[{idx}/{len(self.model_names)}] {name}")
            try:
                pipeline = EyeStatePipeline(
                    strategy=ModelFactory.create_model(name),
                    grid=self.config.get_model_grid(name),
                    n_folds=cv_config['n_folds'],
                    train_fraction=data_config['train_fraction'],
                    random_state=data_config['random_state'],
                    n_jobs=cv_config['n_jobs'],
                )
                self.results[name] = pipeline.run(labeled, unlabeled)
            except Exception as e:
                logger.error(f"  ✗ {name} failed: {e}")
                self.failures[name] = str(e)

        self._save_results()
        if self.config.get_visualization_config().get('enabled', True):
            self._generate_plots()
        self._print_summary()
        return len(self.failures)

    def _save_results(self):
        """Write per-model CV tables, predictions and a combined summary."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        summaries = {}
        for name, result in self.results.items():
            result.model_result.cv_results_frame().to_csv(self.output_dir / f'{name}_cv_results.csv', index=False)
            if result.test_predictions is not None:
                pd.DataFrame({'prediction': result.test_predictions}).to_csv(
                    self.output_dir / f'{name}_test_predictions.csv', index_label='record')
            summaries[name] = result.summary()

        summaries.update({name: {'error': msg} for name, msg in self.failures.items()})
        with open(self.output_dir / 'summary.json', 'w') as f:
            json.dump(summaries, f, indent=2, default=str)

        logger.info(f"\nResults saved to: {self.output_dir}")

    def _generate_plots(self):
        from eyestate.visualization import Plotter

        plots_dir = self.output_dir / 'plots'
        plots_dir.mkdir(parents=True, exist_ok=True)
        plotter = Plotter()

        for name, result in self.results.items():
            plotter.plot_confusion_matrix(result.validation_confusion,
                                          title=f'{name} validation',
                                          save_path=plots_dir / f'{name}_confusion_matrix.png')
            plotter.plot_cv_errors(result.model_result, save_path=plots_dir / f'{name}_cv_errors.png')
            plotter.plot_label_distribution(result.test_label_distribution,
                                            title=f'{name} test predictions',
                                            save_path=plots_dir / f'{name}_test_distribution.png')

    def _print_summary(self):
        """Print run summary, best model first."""
        logger.info("\n" + "=" * 80)
        logger.info("SUMMARY")
        logger.info("=" * 80)

        ranked = sorted(self.results.items(), key=lambda item: item[1].validation_error)
        for i, (name, result) in enumerate(ranked, 1):
            logger.info(
                f"  {i}. {name:<8} params: {result.best_params}, "
                f"CV error: {result.model_result.mean_cv_error:.4f}, "
                f"Val error: {result.validation_error:.4f}"
            )

        if self.failures:
            logger.info(f"\nFailed models: {', '.join(self.failures)}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="EEG eye-state model selection")
    parser.add_argument('config', type=str, help='Path to configuration file (YAML)')
    parser.add_argument('--model', action='append', choices=ModelFactory.list_models(),
                        help='Run only this model (repeatable); default: all enabled')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    level = 'DEBUG' if args.debug else 'INFO'
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )
    logger.remove()
    logger.add(sys.stderr, level=level)

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error(f"Configuration file not found: {args.config}")
        return 1

    try:
        trainer = EyeStateTrainer(args.config, models=args.model)
        logger.add(trainer.output_dir / 'run.log', level=level)
        return 1 if trainer.run() else 0
    except Exception as e:
        logger.exception(f"Run failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
