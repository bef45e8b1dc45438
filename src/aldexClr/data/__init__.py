"""
Data handling modules for aldexClr.

This module contains count table loading, coercion and validation utilities.
"""

from .loader import DataLoader
from .validator import CountTableValidator, SanitizedInput

__all__ = [
    "DataLoader",
    "CountTableValidator",
    "SanitizedInput",
]
