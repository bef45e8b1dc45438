"""
Core functionality for aldexClr.

This module contains the pipeline entry points, the result container and the
shared base types.
"""

from .base import BaseDenominatorResolver, DenominatorMode, TransformBranch
from .exceptions import AldexClrError, ConfigWarning, InvalidInputError, SamplingError, TransformError
from .result import AldexClrResult
from .aldex_clr import AldexClr, aldex_clr

__all__ = [
    "BaseDenominatorResolver",
    "DenominatorMode",
    "TransformBranch",
    "AldexClrError",
    "ConfigWarning",
    "InvalidInputError",
    "SamplingError",
    "TransformError",
    "AldexClrResult",
    "AldexClr",
    "aldex_clr",
]
