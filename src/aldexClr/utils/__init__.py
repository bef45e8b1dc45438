"""
Utility modules for aldexClr.

This module contains logging, configuration and parallel execution helpers.
"""

from .logger import get_logger, setup_logging
from .config import ClrConfig, ConfigManager
from .parallel import JoblibMap, resolve_parallel_map, serial_map

__all__ = [
    "get_logger",
    "setup_logging",
    "ClrConfig",
    "ConfigManager",
    "JoblibMap",
    "resolve_parallel_map",
    "serial_map",
]
