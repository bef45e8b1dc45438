"""
Count table validation for aldexClr.

This module checks and normalizes the raw count table before any sampling.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union
import numbers
import pandas as pd
import numpy as np
from dataclasses import dataclass

from ..core.base import MIN_RELIABLE_MC_SAMPLES, PRIOR
from ..core.exceptions import InvalidInputError
from ..utils.logger import get_logger, progress_logger


@dataclass(frozen=True)
class SanitizedInput:
    """Validated counts (integer, zero-sum rows removed) and aligned condition labels."""
    reads: pd.DataFrame
    conditions: pd.Series
    mc_samples: int
    warnings: Tuple[str, ...] = ()


class CountTableValidator:
    """Validator and sanitizer for feature x sample count tables."""

    def __init__(self, verbose: bool = False):
        self.logger = get_logger("CountTableValidator")
        self.verbose = verbose
        self._progress = progress_logger(self.logger, verbose)

    def sanitize(
        self,
        reads: pd.DataFrame,
        conditions: Union[Sequence[Any], pd.Series, np.ndarray],
        mc_samples: int = MIN_RELIABLE_MC_SAMPLES
    ) -> SanitizedInput:
        """
        Validate the count table and drop features that were never observed.

        Args:
            reads: Count table, features as rows and samples as columns
            conditions: One condition label per sample
            mc_samples: Number of Monte Carlo instances that will be drawn

        Returns:
            SanitizedInput with integer counts, aligned labels and any warnings

        Raises:
            InvalidInputError: If the table, labels or mc_samples are invalid
        """
        if not isinstance(reads, pd.DataFrame):
            raise InvalidInputError(f"reads must be a pandas DataFrame, got {type(reads).__name__}")

        mc_samples = self._validate_mc_samples(mc_samples)
        self._validate_names(reads)
        counts = self._validate_values(reads)
        aligned_conditions = self._validate_conditions(conditions, counts.columns)
        counts = self._remove_zero_rows(counts)

        warnings: List[str] = []
        if mc_samples < MIN_RELIABLE_MC_SAMPLES:
            warnings.append(
                f"values are unreliable when estimated with so few MC samples "
                f"({mc_samples} < {MIN_RELIABLE_MC_SAMPLES})"
            )

        self._progress("data format is OK")
        return SanitizedInput(
            reads=counts,
            conditions=aligned_conditions,
            mc_samples=mc_samples,
            warnings=tuple(warnings)
        )

    def add_prior(self, reads: pd.DataFrame, prior: float = PRIOR) -> pd.DataFrame:
        """Add the fixed prior to every cell of a sanitized count table."""
        return reads.astype(np.float64) + prior

    def _validate_mc_samples(self, mc_samples: Any) -> int:
        """Validate the number of Monte Carlo instances."""
        if isinstance(mc_samples, bool) or not isinstance(mc_samples, numbers.Real):
            raise InvalidInputError(f"mc_samples must be an integer, got {mc_samples!r}")

        if not float(mc_samples).is_integer():
            raise InvalidInputError(f"mc_samples must be an integer, got {mc_samples!r}")

        mc_samples = int(mc_samples)
        if mc_samples < 1:
            raise InvalidInputError(f"mc_samples must be at least 1, got {mc_samples}")

        return mc_samples

    def _validate_names(self, reads: pd.DataFrame) -> None:
        """Validate feature (row) and sample (column) names."""
        if reads.shape[0] == 0:
            raise InvalidInputError("rownames(reads) cannot be empty")

        if reads.shape[1] == 0:
            raise InvalidInputError("colnames(reads) cannot be empty")

        for axis_name, labels in (("row", reads.index), ("col", reads.columns)):
            if any(self._is_blank(label) for label in labels):
                raise InvalidInputError(f"{axis_name} names cannot be missing or empty")

            if not labels.is_unique:
                duplicated = labels[labels.duplicated()].unique().tolist()
                raise InvalidInputError(f"{axis_name} names are not unique: {duplicated[:5]}")

    def _validate_values(self, reads: pd.DataFrame) -> pd.DataFrame:
        """Validate that every count is a finite, non-negative integer."""
        non_numeric = [
            column for column, dtype in reads.dtypes.items()
            if not pd.api.types.is_numeric_dtype(dtype) or pd.api.types.is_bool_dtype(dtype)
        ]
        if non_numeric:
            raise InvalidInputError(f"reads contain non-numeric or boolean columns: {non_numeric[:5]}")

        values = reads.to_numpy(dtype=np.float64)

        if not np.isfinite(values).all():
            raise InvalidInputError("one or more reads are not finite")

        if (np.round(values) != values).any():
            raise InvalidInputError("not all reads are integers")

        if (values < 0).any():
            raise InvalidInputError("one or more reads are negative")

        return pd.DataFrame(values.astype(np.int64), index=reads.index, columns=reads.columns)

    def _validate_conditions(
        self,
        conditions: Union[Sequence[Any], pd.Series, np.ndarray],
        samples: pd.Index
    ) -> pd.Series:
        """Align condition labels with the sample columns."""
        if conditions is None or isinstance(conditions, (str, bytes)):
            raise InvalidInputError("conditions must be a sequence with one label per sample")

        if isinstance(conditions, pd.Series) and set(conditions.index) == set(samples):
            if not conditions.index.is_unique:
                raise InvalidInputError("conditions index contains duplicated sample names")
            labels = conditions.reindex(samples).to_numpy()
        else:
            labels = np.asarray(list(conditions), dtype=object)

        if labels.ndim != 1 or len(labels) != len(samples):
            raise InvalidInputError(
                f"expected {len(samples)} condition labels (one per sample), got {len(labels)}"
            )

        if any(self._is_blank(label) for label in labels):
            raise InvalidInputError("condition labels cannot be missing or empty")

        return pd.Series(labels, index=samples, name="condition")

    def _remove_zero_rows(self, reads: pd.DataFrame) -> pd.DataFrame:
        """Remove every feature whose counts sum to zero across samples."""
        row_sums = reads.sum(axis=1)
        kept = reads.loc[row_sums > 0]

        removed = reads.shape[0] - kept.shape[0]
        if kept.shape[0] == 0:
            raise InvalidInputError("no features remain after removing rows with sums equal to zero")

        self._progress(f"removed rows with sums equal to zero ({removed} of {reads.shape[0]})")
        return kept

    @staticmethod
    def _is_blank(label: Optional[Any]) -> bool:
        if isinstance(label, str):
            return label.strip() == ""
        return pd.api.types.is_scalar(label) and bool(pd.isna(label))
