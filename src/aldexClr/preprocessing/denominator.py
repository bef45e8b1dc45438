"""
Denominator (feature subset) resolution for aldexClr.

The CLR reference of each Monte Carlo instance is the mean log2 frequency
over a set of features. This module resolves that set from a mode name or an
explicit selection, and checks any resolver's output before it is used.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence
import numbers
import pandas as pd
import numpy as np

from ..core.base import BaseDenominatorResolver, Denominator, DenominatorMode, FeatureSubset, PRIOR
from ..core.exceptions import InvalidInputError
from ..utils.logger import get_logger


def parse_denominator(denom: Denominator) -> DenominatorMode:
    """
    Map a denominator argument to its mode.

    Only a sequence of features selects the explicit mode; the bare
    "explicit" name carries no features and is rejected.
    """
    if isinstance(denom, str):
        try:
            denom = DenominatorMode(denom.strip().lower())
        except ValueError:
            valid = ", ".join(mode.value for mode in DenominatorMode if mode is not DenominatorMode.EXPLICIT)
            raise InvalidInputError(
                f"Unknown denominator '{denom}'. Use one of {valid} or an explicit feature set"
            ) from None

    if isinstance(denom, DenominatorMode):
        if denom is DenominatorMode.EXPLICIT:
            raise InvalidInputError(
                "explicit denominators are given as a list of feature positions or names, "
                "not as the mode name"
            )
        return denom

    if isinstance(denom, (Sequence, np.ndarray, pd.Index)):
        return DenominatorMode.EXPLICIT

    raise InvalidInputError(f"Unsupported denominator type: {type(denom).__name__}")


def unique_conditions(conditions: pd.Series) -> List[Any]:
    """Distinct condition labels in first-appearance order."""
    return list(pd.unique(conditions.to_numpy()))


class DenominatorResolver(BaseDenominatorResolver):
    """Default resolver for the all, iqlr, zero and explicit denominator modes."""

    def __init__(self):
        self.logger = get_logger("DenominatorResolver")

    def resolve(
        self,
        reads: pd.DataFrame,
        conditions: pd.Series,
        denom: Denominator
    ) -> FeatureSubset:
        """Resolve the denominator features of a sanitized count table."""
        mode = parse_denominator(denom)

        if mode is DenominatorMode.ALL:
            subset = np.arange(reads.shape[0])
        elif mode is DenominatorMode.IQLR:
            subset = self._inter_quartile_features(reads)
        elif mode is DenominatorMode.ZERO:
            subset = self._non_zero_features(reads, conditions)
        else:
            subset = self._explicit_features(reads, denom)

        self.logger.debug(f"Resolved '{mode.value}' denominator: {_describe(subset)}")
        return subset

    def _inter_quartile_features(self, reads: pd.DataFrame) -> np.ndarray:
        """Features whose CLR variance lies strictly inside the inter-quartile range."""
        if reads.shape[1] < 2:
            raise InvalidInputError("the iqlr denominator needs at least 2 samples to estimate variances")

        log_reads = np.log2(reads.to_numpy(dtype=np.float64) + PRIOR)
        clr = log_reads - log_reads.mean(axis=0)

        feature_variances = clr.var(axis=1, ddof=1)
        lower, upper = np.percentile(feature_variances, [25, 75])
        subset = np.flatnonzero((feature_variances > lower) & (feature_variances < upper))

        if subset.size == 0:
            raise InvalidInputError(
                "no feature has a CLR variance inside the inter-quartile range; "
                "the iqlr denominator needs more features"
            )
        return subset

    def _non_zero_features(self, reads: pd.DataFrame, conditions: pd.Series) -> Dict[Any, np.ndarray]:
        """Per condition, the features observed in every sample of that condition."""
        subsets: Dict[Any, np.ndarray] = OrderedDict()
        for label in unique_conditions(conditions):
            members = conditions.index[conditions.to_numpy() == label]
            subset = np.flatnonzero((reads[members].to_numpy() > 0).all(axis=1))
            if subset.size == 0:
                raise InvalidInputError(
                    f"no feature is non-zero in every sample of condition '{label}'; "
                    f"the zero denominator cannot be used"
                )
            subsets[label] = subset
        return subsets

    def _explicit_features(self, reads: pd.DataFrame, denom: Sequence[Any]) -> np.ndarray:
        """Positions of an explicit selection given as integer positions or feature names."""
        selection = list(denom)
        if len(selection) == 0:
            raise InvalidInputError("an explicit denominator must name at least one feature")

        if all(isinstance(item, numbers.Integral) and not isinstance(item, bool) for item in selection):
            positions = np.asarray(selection, dtype=np.int64)
        else:
            positions = reads.index.get_indexer(selection)
            missing = [item for item, position in zip(selection, positions) if position < 0]
            if missing:
                raise InvalidInputError(f"denominator features not found in the count table: {missing[:5]}")

        return np.unique(positions)


def validate_feature_subset(
    subset: FeatureSubset,
    n_features: int,
    conditions: pd.Series
) -> FeatureSubset:
    """
    Check a resolver's output against the feature subset contract.

    Args:
        subset: One index array, or a mapping of condition label to index array
        n_features: Number of features in the sanitized table
        conditions: Condition label per sample

    Returns:
        The subset with sorted, de-duplicated int64 index arrays; a mapping is
        returned ordered by first appearance of each label

    Raises:
        InvalidInputError: If indices fall outside the table, a set is empty,
            or the per-condition keys do not match the condition labels
    """
    if isinstance(subset, dict):
        labels = unique_conditions(conditions)
        if set(subset.keys()) != set(labels) or len(subset) != len(labels):
            raise InvalidInputError(
                f"per-condition denominator must have exactly one set per condition "
                f"{labels}, got {list(subset.keys())}"
            )
        return OrderedDict(
            (label, _validate_indices(subset[label], n_features, label)) for label in labels
        )

    return _validate_indices(subset, n_features)


def covers_all_features(subset: FeatureSubset, n_features: int) -> bool:
    """Whether every resolved set spans the whole feature range."""
    sets = subset.values() if isinstance(subset, dict) else [subset]
    return all(len(indices) == n_features for indices in sets)


def _validate_indices(indices: Any, n_features: int, label: Optional[Any] = None) -> np.ndarray:
    where = "" if label is None else f" for condition '{label}'"
    values = np.asarray(indices)

    if values.ndim != 1 or values.size == 0:
        raise InvalidInputError(f"denominator feature set{where} must be a non-empty 1-D index set")

    if not np.issubdtype(values.dtype, np.integer):
        raise InvalidInputError(f"denominator feature set{where} must contain integer positions")

    if values.min() < 0 or values.max() >= n_features:
        raise InvalidInputError(
            f"denominator feature set{where} has indices outside [0, {n_features})"
        )

    return np.unique(values.astype(np.int64))


def _describe(subset: FeatureSubset) -> str:
    if isinstance(subset, dict):
        return ", ".join(f"{label}: {len(indices)} features" for label, indices in subset.items())
    return f"{len(subset)} features"
