#!/usr/bin/env python3
"""
aldexClr v1.0 - command line entry point.

Usage:
    aldex-clr --counts counts.csv --conditions conditions.csv --mc_samples 128 --denom all --output results/
"""

import sys
from typing import Optional, Sequence

from aldexClr.cli.argument_parser import parse_arguments
from aldexClr.core.exceptions import AldexClrError
from aldexClr.utils.logger import get_logger


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point: parse arguments and run the CLR pipeline."""
    from aldexClr.pipelines.clr import handle_clr

    args = parse_arguments(argv)
    try:
        handle_clr(args)
    except (AldexClrError, FileNotFoundError) as e:
        get_logger("aldexClr").error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
