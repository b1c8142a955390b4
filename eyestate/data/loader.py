"""Data loading utilities for labeled and unlabeled EEG eye-state tables."""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Tuple, Dict, Any, Optional, Union
from loguru import logger

from .containers import Dataset
from ..exceptions import FeatureDimensionError

LabelColumn = Optional[Union[str, int]]


class DataLoader:
    """Handles data loading from CSV and TXT files."""

    def load_from_config(self, config: Dict[str, Any], project_root: Path = Path('.')) -> Tuple[Dataset, Optional[Dataset]]:
        """
        Load the labeled training table and the optional unlabeled test table.

        Config format:
           {train_file: 'train.csv', test_file: 'test.csv',
            label_column: 'eyeDetection', skip_rows: 0}

        Args:
            config: 'data' section of the configuration
            project_root: Root directory for relative paths

        Returns:
            labeled: Dataset with labels
            unlabeled: Dataset without labels (None if no test_file)
        """
        train_file = config.get('train_file')
        if not train_file:
            raise ValueError("Data config must provide 'train_file'")

        skip_rows = config.get('skip_rows', 0)
        label_column = config.get('label_column')

        labeled = self.load_labeled(project_root / train_file, label_column, skip_rows)

        unlabeled = None
        if config.get('test_file'):
            unlabeled = self.load_unlabeled(project_root / config['test_file'], skip_rows)
            self.check_compatible(labeled, unlabeled)

        return labeled, unlabeled

    def load_labeled(self, file_path: Union[str, Path], label_column: LabelColumn = None, skip_rows: int = 0) -> Dataset:
        """Load a table whose label column is named, indexed, or last."""
        df = self._read_frame(Path(file_path), skip_rows)
        dataset = self.from_frame(df, label_column=label_column if label_column is not None else -1)
        counts = dict(zip(*np.unique(dataset.y, return_counts=True)))
        logger.info(f"Loaded labeled: {dataset.n_records} records, {dataset.n_features} features, classes {counts}")
        return dataset

    def load_unlabeled(self, file_path: Union[str, Path], skip_rows: int = 0) -> Dataset:
        """Load a feature-only table."""
        df = self._read_frame(Path(file_path), skip_rows)
        dataset = self.from_frame(df)
        logger.info(f"Loaded unlabeled: {dataset.n_records} records, {dataset.n_features} features")
        return dataset

    @staticmethod
    def from_frame(df: pd.DataFrame, label_column: LabelColumn = None) -> Dataset:
        """
        Convert a DataFrame to a Dataset.

        Args:
            df: Table with one record per row
            label_column: Column name or position holding labels (None = unlabeled)
        """
        if label_column is None:
            features = df
            y = None
        else:
            if isinstance(label_column, int):
                label_column = df.columns[label_column]
            if label_column not in df.columns:
                raise ValueError(f"Label column '{label_column}' not found in {list(df.columns)}")
            features = df.drop(columns=[label_column])
            y = df[label_column].to_numpy()

        names = None
        if not all(isinstance(c, (int, np.integer)) for c in features.columns):
            names = tuple(str(c) for c in features.columns)

        return Dataset(X=features.to_numpy(dtype=float), y=y, feature_names=names)

    @staticmethod
    def check_compatible(labeled: Dataset, unlabeled: Dataset) -> None:
        """Column count and order must match between train and test tables."""
        if labeled.n_features != unlabeled.n_features:
            raise FeatureDimensionError(
                f"Train has {labeled.n_features} features, test has {unlabeled.n_features}"
            )
        if labeled.feature_names and unlabeled.feature_names and labeled.feature_names != unlabeled.feature_names:
            raise FeatureDimensionError(
                f"Feature columns differ: {labeled.feature_names} vs {unlabeled.feature_names}"
            )

    def _read_frame(self, file_path: Path, skip_rows: int = 0) -> pd.DataFrame:
        """Read data from file."""
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if file_path.suffix == '.csv':
            return pd.read_csv(file_path, skiprows=skip_rows)

        # TXT - auto-detect delimiter, no header
        with open(file_path, 'r') as f:
            for _ in range(skip_rows):
                f.readline()
            first_line = f.readline().strip()

        for delimiter in [',', '\t', '|', ';']:
            if delimiter in first_line:
                return pd.read_csv(file_path, sep=delimiter, header=None, skiprows=skip_rows)
        return pd.read_csv(file_path, sep=r'\s+', header=None, skiprows=skip_rows)
