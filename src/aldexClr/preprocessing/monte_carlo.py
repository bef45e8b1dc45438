"""
Monte Carlo Dirichlet sampling for aldexClr.

Each sample's prior-adjusted counts are the concentration parameters of a
Dirichlet distribution. Drawing from it gives relative-abundance vectors
consistent with the observed counts under technical (resequencing) variation.

Random source: one master RandomState draws one seed per sample, in column
order, before any sampling starts. Each sample then draws from its own
RandomState. A fixed random_state therefore gives identical output whether
the samples are processed serially or in parallel.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple, Union
import pandas as pd
import numpy as np
from sklearn.utils import check_random_state

from ..core.base import ParallelMap
from ..core.exceptions import SamplingError
from ..utils.logger import get_logger, progress_logger
from ..utils.parallel import serial_map

MAX_INT = np.iinfo(np.int32).max


def draw_dirichlet_instances(task: Tuple[np.ndarray, int, int, pd.Index]) -> pd.DataFrame:
    """
    Draw Monte Carlo frequency instances for one sample.

    Args:
        task: (concentration vector, seed, number of instances, feature names)

    Returns:
        Frequencies as features x instances; every column sums to 1
    """
    alpha, seed, mc_samples, feature_names = task
    random_state = np.random.RandomState(seed)
    draws = random_state.dirichlet(alpha, size=mc_samples)
    return pd.DataFrame(draws.T, index=feature_names, columns=pd.RangeIndex(mc_samples))


class DirichletSampler:
    """Draws Monte Carlo Dirichlet instances for every sample of a table."""

    def __init__(
        self,
        mc_samples: int = 128,
        random_state: Optional[Union[int, np.random.RandomState]] = None,
        verbose: bool = False
    ):
        self.mc_samples = mc_samples
        self.random_state = random_state
        self.verbose = verbose
        self.logger = get_logger("DirichletSampler")
        self._progress = progress_logger(self.logger, verbose)

    def sample(
        self,
        reads: pd.DataFrame,
        parallel_map: ParallelMap = serial_map
    ) -> Dict[Any, pd.DataFrame]:
        """
        Draw mc_samples frequency vectors per sample.

        Args:
            reads: Prior-adjusted table (strictly positive, features x samples)
            parallel_map: Map used to process samples

        Returns:
            Ordered mapping of sample name to features x mc_samples frequencies

        Raises:
            SamplingError: If any drawn frequency is non-finite
        """
        seeds = self.sample_seeds(reads.shape[1])
        tasks: List[Tuple[np.ndarray, int, int, pd.Index]] = [
            (reads[sample].to_numpy(dtype=np.float64), int(seed), self.mc_samples, reads.index)
            for sample, seed in zip(reads.columns, seeds)
        ]

        instances = OrderedDict(zip(reads.columns, parallel_map(draw_dirichlet_instances, tasks)))

        for sample, frequencies in instances.items():
            if not np.isfinite(frequencies.to_numpy()).all():
                raise SamplingError(f"non-finite frequencies estimated for sample '{sample}'")

        self._progress(f"dirichlet samples complete ({len(instances)} samples x {self.mc_samples} instances)")
        return instances

    def sample_seeds(self, n_samples: int) -> np.ndarray:
        """One independent seed per sample, drawn from the master random state."""
        random_state = check_random_state(self.random_state)
        return random_state.randint(MAX_INT, size=n_samples)
