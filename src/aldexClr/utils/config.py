"""
Configuration management for aldexClr.

This module contains configuration loading and management utilities.
"""

from typing import Any, Dict, List, Optional, Union
import yaml
import json
from pathlib import Path
from dataclasses import dataclass, asdict

from ..core.base import DenominatorMode
from .logger import get_logger


@dataclass
class ClrConfig:
    """Configuration for a Monte Carlo CLR run."""

    # Sampling configuration
    mc_samples: int = 128
    denom: Union[str, List[Any]] = "all"
    random_state: Optional[int] = None

    # Execution configuration
    use_mc: bool = False
    n_jobs: int = -1
    backend: str = "loky"

    # Reporting configuration
    verbose: bool = False
    log_level: str = "INFO"
    output_dir: str = "./results"

    def __post_init__(self):
        """Normalize values that YAML or callers may hand over in other shapes."""
        if isinstance(self.denom, DenominatorMode):
            self.denom = self.denom.value
        elif isinstance(self.denom, tuple):
            self.denom = list(self.denom)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        data = asdict(self)
        if not isinstance(data["denom"], str):
            data["denom"] = [item.item() if hasattr(item, "item") else item for item in data["denom"]]
        return data


# File suffix -> parser for configuration files
_CONFIG_READERS = {
    '.yaml': yaml.safe_load,
    '.yml': yaml.safe_load,
    '.json': json.load,
}


class ConfigManager:
    """
    Layers configuration sources onto a ClrConfig.

    Defaults come from ClrConfig, a YAML/JSON file may override them, and
    explicit keyword updates override both. Unknown keys are logged and
    ignored.
    """

    def __init__(self, config: Optional[ClrConfig] = None):
        self.logger = get_logger("ConfigManager")
        self.config = config if config is not None else ClrConfig()

    def load_from_file(self, config_path: Union[str, Path]) -> 'ConfigManager':
        """
        Apply the settings of a YAML or JSON file.

        Args:
            config_path: Path to configuration file

        Returns:
            Self for method chaining
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        reader = _CONFIG_READERS.get(config_path.suffix.lower())
        if reader is None:
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        self.logger.info(f"Loading configuration from {config_path}")
        with open(config_path, 'r') as f:
            config_data = reader(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a mapping of keys to values")

        return self.update_config(**config_data)

    def save_to_file(self, config_path: Union[str, Path]) -> None:
        """Write the effective configuration as YAML."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            yaml.safe_dump(self.config.to_dict(), f, default_flow_style=False, indent=2)
        self.logger.info(f"Saved run configuration to {config_path}")

    def get_config(self) -> ClrConfig:
        return self.config

    def update_config(self, **kwargs) -> 'ConfigManager':
        """
        Override configuration values; the result is normalized again.

        Returns:
            Self for method chaining
        """
        for key, value in kwargs.items():
            if hasattr(self.config, key):
                setattr(self.config, key, value)
            else:
                self.logger.warning(f"Unknown configuration key: {key}")

        self.config.__post_init__()
        return self
