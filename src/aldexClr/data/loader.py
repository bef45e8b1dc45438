"""
Data loading utilities for aldexClr.

This module turns the supported count table representations into the one
canonical shape the pipeline works on: a pandas DataFrame with features as
rows and samples as columns.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union
import pandas as pd
import numpy as np
from pathlib import Path

from ..core.exceptions import InvalidInputError
from ..utils.logger import get_logger


def _infer_separator(path: Path) -> str:
    """Comma for .csv files, tab for everything else."""
    return ',' if path.suffix.lower() == '.csv' else '\t'


class DataLoader:
    """Data loader and table coercion for count data."""

    def __init__(self):
        self.logger = get_logger("DataLoader")

    def load_counts(
        self,
        counts_path: Union[str, Path],
        sep: Optional[str] = None
    ) -> pd.DataFrame:
        """
        Load a count table from a delimited text file.

        The first column holds feature names, the header row holds sample names.

        Args:
            counts_path: Path to the count table
            sep: Field separator; inferred from the file suffix when omitted

        Returns:
            Count table (features x samples)
        """
        counts_path = Path(counts_path)
        if not counts_path.exists():
            raise FileNotFoundError(f"Count table not found: {counts_path}")

        self.logger.info(f"Loading count table from {counts_path}")
        reads = pd.read_table(counts_path, sep=sep or _infer_separator(counts_path), index_col=0)
        self.logger.info(f"Loaded count table: {reads.shape[0]} features x {reads.shape[1]} samples")
        return reads

    def load_conditions(
        self,
        conditions_path: Union[str, Path],
        column: Optional[str] = None,
        sep: Optional[str] = None
    ) -> pd.Series:
        """
        Load condition labels from a delimited text file.

        The first column holds sample names; the labels are taken from
        ``column`` or, when omitted, from the first remaining column.

        Args:
            conditions_path: Path to the sample metadata file
            column: Name of the column holding the condition labels
            sep: Field separator; inferred from the file suffix when omitted

        Returns:
            Condition labels indexed by sample name
        """
        conditions_path = Path(conditions_path)
        if not conditions_path.exists():
            raise FileNotFoundError(f"Conditions file not found: {conditions_path}")

        metadata = pd.read_table(conditions_path, sep=sep or _infer_separator(conditions_path), index_col=0)
        if metadata.shape[1] == 0:
            raise InvalidInputError(f"Conditions file {conditions_path} has no label column")

        if column is None:
            column = metadata.columns[0]
        elif column not in metadata.columns:
            raise InvalidInputError(f"Column '{column}' not found in {conditions_path}")

        conditions = metadata[column].astype(str)
        self.logger.info(
            f"Loaded {len(conditions)} condition labels from column '{column}' "
            f"({conditions.nunique()} distinct)"
        )
        return conditions

    def coerce_counts(
        self,
        reads: Any,
        feature_names: Optional[Sequence[Any]] = None,
        sample_names: Optional[Sequence[Any]] = None
    ) -> pd.DataFrame:
        """
        Coerce a supported representation into a feature x sample DataFrame.

        Supported inputs are a DataFrame, a 2-D numpy array (or nested
        list), a mapping of sample name to per-feature counts, and a path to
        a delimited text file.

        Args:
            reads: Count data in one of the supported representations
            feature_names: Row names for array input
            sample_names: Column names for array input

        Returns:
            Count table (features x samples)

        Raises:
            InvalidInputError: If the representation is not supported
        """
        if isinstance(reads, pd.DataFrame):
            if feature_names is not None or sample_names is not None:
                raise InvalidInputError("feature_names/sample_names are only accepted for array input")
            return reads.copy()

        if isinstance(reads, (str, Path)):
            return self.load_counts(reads)

        if isinstance(reads, Mapping):
            self.logger.debug("converted sample mapping into data frame")
            return pd.DataFrame(dict(reads), index=feature_names)

        if isinstance(reads, (np.ndarray, list, tuple)):
            matrix = np.asarray(reads)
            if matrix.ndim != 2:
                raise InvalidInputError(f"count matrix must be 2-dimensional, got {matrix.ndim} dimensions")
            self.logger.debug("converted count matrix into data frame")
            return pd.DataFrame(
                matrix,
                index=self._axis_labels(feature_names, matrix.shape[0], "feature_names"),
                columns=self._axis_labels(sample_names, matrix.shape[1], "sample_names")
            )

        raise InvalidInputError(f"Unsupported count table type: {type(reads).__name__}")

    @staticmethod
    def _axis_labels(names: Optional[Sequence[Any]], size: int, what: str) -> Optional[List[Any]]:
        if names is None:
            return None
        names = list(names)
        if len(names) != size:
            raise InvalidInputError(f"{what} has {len(names)} entries, expected {size}")
        return names
