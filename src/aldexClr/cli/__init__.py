"""
Command line interface for aldexClr.
"""

from .argument_parser import create_argument_parser, parse_arguments

__all__ = [
    "create_argument_parser",
    "parse_arguments",
]
