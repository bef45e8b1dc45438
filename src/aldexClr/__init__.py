"""
aldexClr v1.0

Monte Carlo centered log-ratio transformation of count data for
compositional data analysis.
"""

__version__ = "1.0.0"

# Core imports
from .core.aldex_clr import AldexClr, aldex_clr
from .core.result import AldexClrResult
from .core.base import BaseDenominatorResolver, DenominatorMode, TransformBranch
from .core.exceptions import (
    AldexClrError,
    ConfigWarning,
    InvalidInputError,
    SamplingError,
    TransformError,
)

# Data handling
from .data.loader import DataLoader
from .data.validator import CountTableValidator, SanitizedInput

# Preprocessing
from .preprocessing.monte_carlo import DirichletSampler
from .preprocessing.clr_transform import CLRTransformer
from .preprocessing.denominator import DenominatorResolver

# Utilities
from .utils.config import ClrConfig, ConfigManager

__all__ = [
    # Core
    "AldexClr",
    "aldex_clr",
    "AldexClrResult",
    "BaseDenominatorResolver",
    "DenominatorMode",
    "TransformBranch",

    # Errors
    "AldexClrError",
    "ConfigWarning",
    "InvalidInputError",
    "SamplingError",
    "TransformError",

    # Data
    "DataLoader",
    "CountTableValidator",
    "SanitizedInput",

    # Preprocessing
    "DirichletSampler",
    "CLRTransformer",
    "DenominatorResolver",

    # Configuration
    "ClrConfig",
    "ConfigManager",
]
