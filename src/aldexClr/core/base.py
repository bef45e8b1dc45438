"""
Base classes and shared types for aldexClr.

This module defines the denominator modes, the feature subset shape exchanged
between the resolver and the transformer, and the resolver interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Sequence, Union
import pandas as pd
import numpy as np
from enum import Enum


# Prior added to every count before it is used as a Dirichlet concentration
PRIOR = 0.5

# Below this many Monte Carlo instances the estimates are considered unreliable
MIN_RELIABLE_MC_SAMPLES = 128


class DenominatorMode(Enum):
    """Enumeration of supported denominator modes."""
    ALL = "all"
    IQLR = "iqlr"  # inter-quartile log-ratio
    ZERO = "zero"
    EXPLICIT = "explicit"


class TransformBranch(Enum):
    """Which CLR reference the transformer uses."""
    DEFAULT = "default"        # geometric mean over every feature
    RESTRICTED = "restricted"  # geometric mean over a (per-condition) subset


# One index array for every sample, or one per distinct condition label
FeatureSubset = Union[np.ndarray, Dict[Any, np.ndarray]]

# Denominator argument as accepted from callers
Denominator = Union[str, DenominatorMode, Sequence[Union[int, str]]]

# (func, items) -> list, equivalent to list(map(func, items))
ParallelMap = Callable[[Callable[[Any], Any], Iterable[Any]], List[Any]]


class BaseDenominatorResolver(ABC):
    """Base class for all feature-subset resolvers in aldexClr."""

    @abstractmethod
    def resolve(
        self,
        reads: pd.DataFrame,
        conditions: pd.Series,
        denom: Denominator
    ) -> FeatureSubset:
        """
        Resolve the features that define the CLR reference.

        Args:
            reads: Sanitized count table (features x samples)
            conditions: Condition label per sample, indexed by sample name
            denom: Denominator mode or explicit feature set

        Returns:
            One index array for all samples, or a mapping of condition
            label to index array in first-appearance order of labels
        """
        pass

    def __call__(
        self,
        reads: pd.DataFrame,
        conditions: pd.Series,
        denom: Denominator
    ) -> FeatureSubset:
        return self.resolve(reads, conditions, denom)
