"""
CLR (Centered Log-Ratio) transformation for aldexClr.

This module turns Monte Carlo frequency instances into log2-ratio values
relative to the geometric mean of a denominator feature set.
"""

from collections import OrderedDict
from typing import Any, Dict, Optional, Tuple
import pandas as pd
import numpy as np

from ..core.base import FeatureSubset, ParallelMap, TransformBranch
from ..core.exceptions import TransformError
from ..utils.logger import get_logger, progress_logger
from ..utils.parallel import serial_map
from .denominator import covers_all_features


def clr_instances(task: Tuple[pd.DataFrame, Optional[np.ndarray]]) -> pd.DataFrame:
    """
    CLR-transform the Monte Carlo instances of one sample.

    Args:
        task: (frequencies as features x instances, denominator positions or
            None to use every feature)

    Returns:
        log2 frequencies minus the per-instance mean log2 frequency of the
        denominator features
    """
    frequencies, denominator = task
    log_frequencies = np.log2(frequencies.to_numpy())

    if denominator is None:
        reference = log_frequencies.mean(axis=0)
    else:
        reference = log_frequencies[denominator].mean(axis=0)

    return pd.DataFrame(
        log_frequencies - reference,
        index=frequencies.index,
        columns=frequencies.columns
    )


class CLRTransformer:
    """CLR transformer for Monte Carlo frequency instances."""

    def __init__(
        self,
        feature_subset: FeatureSubset,
        conditions: pd.Series,
        n_features: int,
        verbose: bool = False
    ):
        self.feature_subset = feature_subset
        self.conditions = conditions
        self.n_features = n_features
        self.verbose = verbose
        self.logger = get_logger("CLRTransformer")
        self._progress = progress_logger(self.logger, verbose)

    @property
    def branch(self) -> TransformBranch:
        """DEFAULT when the denominator spans every feature, RESTRICTED otherwise."""
        if covers_all_features(self.feature_subset, self.n_features):
            return TransformBranch.DEFAULT
        return TransformBranch.RESTRICTED

    def transform(
        self,
        instances: Dict[Any, pd.DataFrame],
        parallel_map: ParallelMap = serial_map
    ) -> Dict[Any, pd.DataFrame]:
        """
        Apply the CLR transformation to every sample.

        Args:
            instances: Ordered mapping of sample name to frequency instances
            parallel_map: Map used to process samples

        Returns:
            Ordered mapping of sample name to CLR values (features x instances)

        Raises:
            TransformError: If a sample has no resolvable denominator or any
                resulting value is non-finite
        """
        branch = self.branch
        self._progress(f"applying {branch.value} CLR transformation to {len(instances)} samples")

        tasks = [
            (frequencies, self.denominator_for(sample) if branch is TransformBranch.RESTRICTED else None)
            for sample, frequencies in instances.items()
        ]
        clr = OrderedDict(zip(instances.keys(), parallel_map(clr_instances, tasks)))

        for sample, values in clr.items():
            if not np.isfinite(values.to_numpy()).all():
                raise TransformError(
                    f"non-finite log-frequencies were unexpectedly computed for sample '{sample}'"
                )

        self._progress("clr transformation complete")
        return clr

    def denominator_for(self, sample: Any) -> np.ndarray:
        """
        Denominator positions for one sample.

        Samples are matched to their condition's feature set by sample name
        and condition label, so the order of labels does not matter.
        """
        if not isinstance(self.feature_subset, dict):
            return self.feature_subset

        if sample not in self.conditions.index:
            raise TransformError(f"sample '{sample}' has no condition label")

        label = self.conditions[sample]
        if label not in self.feature_subset:
            raise TransformError(f"no denominator features resolved for condition '{label}'")

        return self.feature_subset[label]
