"""
Preprocessing modules for aldexClr.

This module contains Dirichlet sampling, denominator resolution and the CLR
transformation.
"""

from .monte_carlo import DirichletSampler
from .denominator import DenominatorResolver, validate_feature_subset
from .clr_transform import CLRTransformer

__all__ = [
    "DirichletSampler",
    "DenominatorResolver",
    "validate_feature_subset",
    "CLRTransformer",
]
