"""
CLR pipeline for aldexClr v1.0.

Loads a count table and condition labels, runs the Monte Carlo CLR
transformation and writes a per-sample summary plus the run configuration.
"""

import argparse
from pathlib import Path
from typing import Any, Dict, Union
import pandas as pd

from aldexClr.core.aldex_clr import AldexClr
from aldexClr.core.result import AldexClrResult
from aldexClr.data.loader import DataLoader
from aldexClr.utils.config import ConfigManager
from aldexClr.utils.helpers import ensure_directory
from aldexClr.utils.logger import get_logger, setup_logging
from aldexClr.cli.argument_parser import comma_separated_items

# Command line option -> ClrConfig field
_ARGUMENT_FIELDS = {
    'mc_samples': 'mc_samples',
    'denom': 'denom',
    'seed': 'random_state',
    'use_mc': 'use_mc',
    'cpu': 'n_jobs',
    'verbose': 'verbose',
    'log_level': 'log_level',
    'output': 'output_dir',
}


def handle_clr(args: argparse.Namespace) -> AldexClrResult:
    """Handle the CLR command: build the configuration, load data, run and write outputs."""
    config_manager = _build_config(args)
    config = config_manager.get_config()

    output_dir = ensure_directory(config.output_dir)
    setup_logging(level=config.log_level, log_file=output_dir / "run.log")
    logger = get_logger("ClrPipeline")
    logger.info(f"Output directory: {output_dir}")

    data_loader = DataLoader()
    reads = data_loader.load_counts(args.counts)
    conditions = _load_conditions(data_loader, args.conditions, getattr(args, 'condition_column', None))

    result = AldexClr(config).transform(reads, conditions)
    for message in result.warnings:
        logger.warning(f"Run finished with warning: {message}")

    summary_path = output_dir / f"clr_{args.statistic}.csv"
    result.summarize(args.statistic).to_csv(summary_path)
    logger.info(f"Wrote {args.statistic} CLR values ({result.num_features()} features x "
                f"{len(result)} samples) to {summary_path}")

    config_manager.save_to_file(output_dir / "run_config.yaml")
    return result


def _build_config(args: argparse.Namespace) -> ConfigManager:
    """Defaults, then the configuration file, then explicit command line options."""
    config_manager = ConfigManager()
    if getattr(args, 'config', None):
        config_manager.load_from_file(args.config)

    overrides: Dict[str, Any] = {
        field_name: getattr(args, option)
        for option, field_name in _ARGUMENT_FIELDS.items()
        if getattr(args, option, None) is not None
    }
    return config_manager.update_config(**overrides)


def _load_conditions(
    data_loader: DataLoader,
    conditions: str,
    column: Union[str, None]
) -> Union[pd.Series, list]:
    """Read labels from a file when the argument is a path, otherwise split the list."""
    if Path(conditions).is_file():
        return data_loader.load_conditions(conditions, column=column)
    return comma_separated_items(conditions)
