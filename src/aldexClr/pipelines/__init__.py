"""
Pipelines for aldexClr.
"""

from .clr import handle_clr

__all__ = [
    "handle_clr",
]
