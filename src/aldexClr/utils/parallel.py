"""
Parallel map collaborators for aldexClr.

Every map returned here behaves like list(map(func, items)): results come
back in input order. Parallel execution only changes wall-clock time.
"""

from typing import Any, Callable, Iterable, List, Optional

from joblib import Parallel, delayed

from ..core.base import ParallelMap
from .logger import get_logger


def serial_map(func: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
    """Apply func to each item in order in the current process."""
    return [func(item) for item in items]


class JoblibMap:
    """Order-preserving parallel map backed by joblib."""

    def __init__(self, n_jobs: int = -1, backend: str = "loky", verbose: int = 0):
        self.n_jobs = n_jobs
        self.backend = backend
        self.verbose = verbose

    def __call__(self, func: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
        return Parallel(n_jobs=self.n_jobs, backend=self.backend, verbose=self.verbose)(
            delayed(func)(item) for item in items
        )

    def __repr__(self) -> str:
        return f"JoblibMap(n_jobs={self.n_jobs}, backend={self.backend!r})"


def resolve_parallel_map(
    use_mc: bool,
    parallel_map: Optional[ParallelMap] = None,
    n_jobs: int = -1,
    backend: str = "loky"
) -> ParallelMap:
    """
    Pick the map used for per-sample work, once per call.

    Args:
        use_mc: Whether parallel execution was requested
        parallel_map: Injected map collaborator, used as-is when use_mc is set
        n_jobs: Worker count for the default joblib map
        backend: joblib backend for the default map

    Returns:
        A callable (func, items) -> list
    """
    logger = get_logger("ParallelMap")

    if not use_mc:
        logger.debug("operating in serial mode")
        return serial_map

    if parallel_map is not None:
        logger.debug(f"using injected parallel map {parallel_map!r}")
        return parallel_map

    logger.debug(f"using joblib parallel map (n_jobs={n_jobs}, backend={backend})")
    return JoblibMap(n_jobs=n_jobs, backend=backend)
