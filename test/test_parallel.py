"""Tests for the parallel map collaborators and logging helpers."""

import logging

from aldexClr.utils.logger import get_logger, progress_logger
from aldexClr.utils.parallel import JoblibMap, resolve_parallel_map, serial_map


def _square(value):
    return value * value


class TestParallelMaps:

    def test_serial_map_preserves_order(self):
        assert serial_map(_square, [3, 1, 2]) == [9, 1, 4]

    def test_joblib_map_matches_serial_map(self):
        items = list(range(20))
        assert JoblibMap(n_jobs=2, backend="threading")(_square, items) == serial_map(_square, items)

    def test_resolve_serial_when_disabled(self):
        injected = JoblibMap(n_jobs=2)
        assert resolve_parallel_map(False, parallel_map=injected) is serial_map

    def test_resolve_injected_map(self):
        injected = JoblibMap(n_jobs=2)
        assert resolve_parallel_map(True, parallel_map=injected) is injected

    def test_resolve_default_joblib_map(self):
        mapper = resolve_parallel_map(True, n_jobs=3, backend="threading")
        assert isinstance(mapper, JoblibMap)
        assert mapper.n_jobs == 3
        assert mapper.backend == "threading"


class TestLogging:

    def test_progress_logger_level_follows_verbose(self):
        logger = get_logger("aldexClr.test")
        assert progress_logger(logger, True) == logger.info
        assert progress_logger(logger, False) == logger.debug

    def test_get_logger_returns_named_logger(self):
        logger = get_logger("aldexClr.named")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "aldexClr.named"
