"""
Argument parser for aldexClr v1.0.
"""

import argparse
from typing import Any, List, Optional, Sequence, Union


def str2bool(v):
    """Convert a string to a boolean."""
    if isinstance(v, bool):
        return v
    if v.lower() in ('yes', 'true', 't', 'y', '1'):
        return True
    elif v.lower() in ('no', 'false', 'f', 'n', '0'):
        return False
    else:
        raise argparse.ArgumentTypeError('Boolean value expected.')


def comma_separated_items(value: str) -> List[str]:
    """Parse a comma separated string into a list."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def denominator_argument(value: str) -> Union[str, List[Any]]:
    """Parse --denom: a mode name, or a comma separated list of feature positions or names."""
    items = comma_separated_items(value)
    if len(items) == 1 and items[0].lower() in ('all', 'iqlr', 'zero'):
        return items[0].lower()
    if not items:
        raise argparse.ArgumentTypeError('Denominator must be a mode name or a list of features.')
    if all(item.lstrip('-').isdigit() for item in items):
        return [int(item) for item in items]
    return items


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="aldex-clr",
        description="aldexClr v1.0 - Monte Carlo CLR transformation of count tables",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Input files
    parser.add_argument('--counts', type=str, required=True,
                        help="Count table file (rows=features, columns=samples)")
    parser.add_argument('--conditions', type=str, required=True,
                        help="Conditions file (first column=sample, next column=label) "
                             "or comma separated labels in sample order")
    parser.add_argument('--condition_column', type=str, required=False, default=None,
                        help="Column of the conditions file holding the labels")
    parser.add_argument('--output', type=str, required=False, default=None,
                        help="Output directory (defaults to output_dir of the configuration)")

    # Sampling parameters
    parser.add_argument('--mc_samples', type=int, required=False, default=None,
                        help="Number of Monte Carlo Dirichlet instances per sample (default: 128)")
    parser.add_argument('--denom', type=denominator_argument, required=False, default=None,
                        help="Denominator: all, iqlr, zero, or comma separated feature positions/names")
    parser.add_argument('--seed', type=int, required=False, default=None,
                        help="Random seed for reproducible draws")
    parser.add_argument('--statistic', type=str, required=False, default='median',
                        choices=['median', 'mean'],
                        help="Summary over Monte Carlo instances written to the output table")

    # System parameters
    parser.add_argument('--use_mc', type=str2bool, required=False, default=None,
                        help="Process samples in parallel (default: False)")
    parser.add_argument('--cpu', type=int, required=False, default=None,
                        help="Number of parallel workers (-1 uses all cores)")
    parser.add_argument('--verbose', type=str2bool, required=False, default=None,
                        help="Log progress messages (default: False)")
    parser.add_argument('--log_level', type=str, required=False, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help="Logging level")

    # Configuration file
    parser.add_argument('--config', type=str, required=False, default=None,
                        help="YAML/JSON configuration file (command line options take precedence)")

    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = create_argument_parser()
    return parser.parse_args(argv)
