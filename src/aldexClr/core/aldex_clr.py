"""
Monte Carlo CLR transformation of count tables.

The pipeline runs strictly in this order: sanitize the count table, resolve
the denominator features, add the prior, draw Dirichlet instances per sample,
CLR-transform them and wrap the outcome in an immutable AldexClrResult.
Any error aborts the whole call; no partial result is ever returned.
"""

import time
import warnings
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence, Union
import pandas as pd
import numpy as np

from .base import BaseDenominatorResolver, Denominator, FeatureSubset, ParallelMap
from .exceptions import ConfigWarning
from .result import AldexClrResult
from ..data.loader import DataLoader
from ..data.validator import CountTableValidator
from ..preprocessing.clr_transform import CLRTransformer
from ..preprocessing.denominator import DenominatorResolver, validate_feature_subset
from ..preprocessing.monte_carlo import DirichletSampler
from ..utils.config import ClrConfig
from ..utils.helpers import format_time
from ..utils.logger import get_logger, progress_logger
from ..utils.parallel import resolve_parallel_map

Resolver = Union[BaseDenominatorResolver, Callable[[pd.DataFrame, pd.Series, Denominator], FeatureSubset]]


class AldexClr:
    """
    Monte Carlo CLR transformer for feature x sample count tables.

    Args:
        config: Run configuration; defaults to ClrConfig()
        denominator_resolver: Callable (reads, conditions, denom) returning the
            denominator feature set(s); defaults to DenominatorResolver
        parallel_map: Map used for per-sample work when config.use_mc is set;
            defaults to a joblib map
        **kwargs: Overrides applied on top of config
    """

    def __init__(
        self,
        config: Optional[ClrConfig] = None,
        denominator_resolver: Optional[Resolver] = None,
        parallel_map: Optional[ParallelMap] = None,
        **kwargs
    ):
        for key in kwargs:
            if not hasattr(ClrConfig, key):
                raise TypeError(f"Unknown configuration option: {key}")
        self.config = replace(config if config is not None else ClrConfig(), **kwargs)

        self.denominator_resolver = denominator_resolver or DenominatorResolver()
        self.parallel_map = parallel_map
        self.logger = get_logger("AldexClr")

    def transform(
        self,
        reads: Any,
        conditions: Union[Sequence[Any], pd.Series, np.ndarray]
    ) -> AldexClrResult:
        """
        Generate CLR-transformed Monte Carlo Dirichlet instances per sample.

        Args:
            reads: Count table (features x samples) as a DataFrame, 2-D array,
                sample mapping or file path
            conditions: One condition label per sample

        Returns:
            AldexClrResult with one features x mc_samples CLR matrix per sample

        Raises:
            InvalidInputError: If the counts, labels or options are invalid
            SamplingError: If Dirichlet sampling produced non-finite values
            TransformError: If the CLR transformation produced non-finite values
        """
        config = self.config
        progress = progress_logger(self.logger, config.verbose)
        start = time.time()

        reads = DataLoader().coerce_counts(reads)
        sanitized = CountTableValidator(verbose=config.verbose).sanitize(
            reads, conditions, mc_samples=config.mc_samples
        )
        for message in sanitized.warnings:
            warnings.warn(message, ConfigWarning, stacklevel=2)

        feature_subset = validate_feature_subset(
            self.denominator_resolver(sanitized.reads, sanitized.conditions, config.denom),
            n_features=sanitized.reads.shape[0],
            conditions=sanitized.conditions
        )

        prior_reads = CountTableValidator(verbose=config.verbose).add_prior(sanitized.reads)

        parallel_map = resolve_parallel_map(
            config.use_mc,
            parallel_map=self.parallel_map,
            n_jobs=config.n_jobs,
            backend=config.backend
        )

        sampler = DirichletSampler(
            mc_samples=sanitized.mc_samples,
            random_state=config.random_state,
            verbose=config.verbose
        )
        instances = sampler.sample(prior_reads, parallel_map=parallel_map)

        transformer = CLRTransformer(
            feature_subset,
            sanitized.conditions,
            n_features=prior_reads.shape[0],
            verbose=config.verbose
        )
        clr = transformer.transform(instances, parallel_map=parallel_map)

        result = AldexClrResult(
            analysis_data=clr,
            reads=prior_reads,
            mc_samples=sanitized.mc_samples,
            conditions=sanitized.conditions,
            denom=config.denom,
            feature_subset=feature_subset,
            branch=transformer.branch,
            verbose=config.verbose,
            use_mc=config.use_mc,
            warnings=sanitized.warnings
        )
        progress(f"CLR of {len(result)} samples finished in {format_time(time.time() - start)}")
        return result


def aldex_clr(
    reads: Any,
    conditions: Union[Sequence[Any], pd.Series, np.ndarray],
    mc_samples: int = 128,
    denom: Denominator = "all",
    verbose: bool = False,
    use_mc: bool = False,
    random_state: Optional[Union[int, np.random.RandomState]] = None,
    denominator_resolver: Optional[Resolver] = None,
    parallel_map: Optional[ParallelMap] = None,
    n_jobs: int = -1,
    backend: str = "loky"
) -> AldexClrResult:
    """
    Monte Carlo CLR transform of a count table.

    Example:
        >>> result = aldex_clr(reads, ["A", "A", "B", "B"], mc_samples=128, denom="all")
        >>> result.get_monte_carlo_replicate("sample_1").shape
        (n_features, 128)

    Args:
        reads: Count table (features x samples)
        conditions: One condition label per sample
        mc_samples: Number of Dirichlet Monte Carlo instances per sample
        denom: "all", "iqlr", "zero", or an explicit sequence of feature
            positions or names
        verbose: Log progress at INFO instead of DEBUG
        use_mc: Process samples with a parallel map
        random_state: Seed or RandomState; fixes the draws when given
        denominator_resolver: Replacement for the default resolver
        parallel_map: Replacement for the default joblib map
        n_jobs: Worker count for the default joblib map
        backend: joblib backend for the default map

    Returns:
        AldexClrResult
    """
    config = ClrConfig(
        mc_samples=mc_samples,
        denom=denom,
        random_state=random_state,
        use_mc=use_mc,
        n_jobs=n_jobs,
        backend=backend,
        verbose=verbose
    )
    return AldexClr(
        config,
        denominator_resolver=denominator_resolver,
        parallel_map=parallel_map
    ).transform(reads, conditions)
