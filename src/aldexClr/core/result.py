"""
Result container for aldexClr.

AldexClrResult holds the CLR-transformed Monte Carlo instances of every
sample together with the inputs needed to interpret them. It is immutable:
every accessor hands out copies.
"""

from collections import OrderedDict
from dataclasses import InitVar, dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union
import pandas as pd
import numpy as np

from .base import FeatureSubset, TransformBranch
from .exceptions import TransformError


@dataclass(frozen=True, eq=False)
class AldexClrResult:
    """Monte Carlo CLR instances per sample plus the run's inputs and flags."""

    analysis_data: InitVar[Mapping[Any, pd.DataFrame]]
    reads: InitVar[pd.DataFrame]
    mc_samples: int
    conditions: InitVar[pd.Series]
    denom: Any = "all"
    feature_subset: Optional[FeatureSubset] = None
    branch: TransformBranch = TransformBranch.DEFAULT
    verbose: bool = False
    use_mc: bool = False
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    # Private copies; only reachable through the copying accessors
    _analysis_data: Mapping[Any, pd.DataFrame] = field(init=False, repr=False, default=None)
    _reads: pd.DataFrame = field(init=False, repr=False, default=None)
    _conditions: pd.Series = field(init=False, repr=False, default=None)

    def __post_init__(self, analysis_data, reads, conditions):
        if len(analysis_data) == 0:
            raise TransformError("a CLR result needs at least one sample")

        frames = list(analysis_data.values())
        feature_names = frames[0].index
        instance_names = frames[0].columns

        for sample, frame in analysis_data.items():
            if not frame.index.equals(feature_names):
                raise TransformError(f"sample '{sample}' has a different feature set or ordering")
            if not frame.columns.equals(instance_names):
                raise TransformError(f"sample '{sample}' has a different number of Monte Carlo instances")

        if len(instance_names) != self.mc_samples:
            raise TransformError(
                f"expected {self.mc_samples} Monte Carlo instances per sample, got {len(instance_names)}"
            )

        if not reads.index.equals(feature_names):
            raise TransformError("prior-adjusted reads do not match the CLR feature names")

        if list(conditions.index) != list(analysis_data.keys()):
            raise TransformError("condition labels are not aligned with the CLR samples")

        frozen = OrderedDict((sample, frame.copy()) for sample, frame in analysis_data.items())
        object.__setattr__(self, "_analysis_data", MappingProxyType(frozen))
        object.__setattr__(self, "_reads", reads.copy())
        object.__setattr__(self, "_conditions", conditions.copy())
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def get_sample_ids(self) -> List[Any]:
        """Sample names in column order."""
        return list(self._analysis_data.keys())

    def num_features(self) -> int:
        return self._first().shape[0]

    def num_mc_instances(self) -> int:
        return self._first().shape[1]

    def get_feature_names(self) -> List[Any]:
        return list(self._first().index)

    def get_monte_carlo_replicate(self, key: Union[str, int, Any]) -> pd.DataFrame:
        """
        CLR values of one sample, looked up by name or by position.

        A key that is a sample name wins over positional lookup, so tables
        with integer sample names are addressed by name.

        Raises:
            KeyError: If the key is neither a sample name nor a valid position
        """
        if key in self._analysis_data:
            return self._analysis_data[key].copy()

        if isinstance(key, (int, np.integer)) and not isinstance(key, bool):
            samples = self.get_sample_ids()
            if -len(samples) <= key < len(samples):
                return self._analysis_data[samples[key]].copy()

        raise KeyError(f"No sample named or positioned at {key!r}")

    def get_monte_carlo_instances(self) -> Mapping[Any, pd.DataFrame]:
        """Read-only mapping of sample name to a copy of its CLR values."""
        return MappingProxyType(
            OrderedDict((sample, frame.copy()) for sample, frame in self._analysis_data.items())
        )

    def get_reads(self) -> pd.DataFrame:
        """The prior-adjusted count table the instances were drawn from."""
        return self._reads.copy()

    def get_conditions(self) -> pd.Series:
        return self._conditions.copy()

    def num_conditions(self) -> int:
        """Number of distinct condition labels."""
        return int(self._conditions.nunique())

    def is_restricted(self) -> bool:
        return self.branch is TransformBranch.RESTRICTED

    def summarize(self, statistic: str = "median") -> pd.DataFrame:
        """
        Collapse the Monte Carlo instances into one expected CLR value.

        Args:
            statistic: "median" or "mean" over instances

        Returns:
            Features x samples table
        """
        if statistic not in ("median", "mean"):
            raise ValueError(f"Unsupported statistic: {statistic}. Use 'median' or 'mean'")

        summary = pd.DataFrame(
            {sample: getattr(frame, statistic)(axis=1) for sample, frame in self._analysis_data.items()},
            index=self._first().index
        )
        summary.columns = pd.Index(self.get_sample_ids())
        return summary

    def __len__(self) -> int:
        return len(self._analysis_data)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._analysis_data)

    def __contains__(self, sample: Any) -> bool:
        return sample in self._analysis_data

    def __repr__(self) -> str:
        return (
            f"AldexClrResult(samples={len(self)}, features={self.num_features()}, "
            f"mc_samples={self.mc_samples}, denom={self.denom!r}, branch={self.branch.value})"
        )

    def _first(self) -> pd.DataFrame:
        return next(iter(self._analysis_data.values()))
