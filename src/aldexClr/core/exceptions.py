"""
Exception and warning types for aldexClr.

User data faults raise InvalidInputError before any sampling happens.
SamplingError and TransformError signal non-finite values where only finite
values are mathematically possible; they indicate a defect, not bad input.
"""


class AldexClrError(Exception):
    """Base class for all aldexClr errors."""


class InvalidInputError(AldexClrError, ValueError):
    """Raised when the count table, condition labels or options are invalid."""


class SamplingError(AldexClrError, RuntimeError):
    """Raised when Dirichlet sampling produced non-finite frequencies."""


class TransformError(AldexClrError, RuntimeError):
    """Raised when the CLR transformation produced non-finite values."""


class ConfigWarning(UserWarning):
    """Non-fatal warning about a configuration that gives unreliable estimates."""
