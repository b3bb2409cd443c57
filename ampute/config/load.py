"""
ampute.config.load

Config loading and validation.
"""

import yaml
from pathlib import Path
from typing import Union, Dict, Any

from .schema import AmputeConfig, AmputationConfig, CalibrationConfig
from ..core.exceptions import ConfigError


def load_config(path: Union[str, Path]) -> AmputeConfig:
    """Load configuration from YAML file."""
    path = Path(path)
    
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root in {path} must be a mapping")
    
    return config_from_dict(raw)


def config_from_dict(d: Dict[str, Any]) -> AmputeConfig:
    """Create AmputeConfig from dictionary."""
    try:
        amputation_dict = dict(d.get("amputation", {}))
        
        # YAML may give a single string for one pattern
        if isinstance(amputation_dict.get("types"), str):
            amputation_dict["types"] = [amputation_dict["types"]]
        
        amputation = AmputationConfig(**amputation_dict)
        calibration = CalibrationConfig(**d.get("calibration", {}))
        
        return AmputeConfig(
            amputation=amputation,
            calibration=calibration,
            seed=d.get("seed", 42),
            block_size=d.get("block_size", 4096),
            output_dir=d.get("output_dir", None),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid config: {e}")


def save_config(config: AmputeConfig, path: Union[str, Path]) -> None:
    """Save configuration to YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    
    d = config_to_dict(config)
    
    with open(path, "w") as f:
        yaml.dump(d, f, default_flow_style=False, sort_keys=False)


def config_to_dict(config: AmputeConfig) -> Dict[str, Any]:
    """Convert AmputeConfig to dictionary."""
    amputation_dict = {
        "prop": config.amputation.prop,
        "mechanism": config.amputation.mechanism,
        "standardized": config.amputation.standardized,
        "continuous": config.amputation.continuous,
        "by_cases": config.amputation.by_cases,
    }
    
    # Omit types when defaulted
    if config.amputation.types is not None:
        amputation_dict["types"] = list(config.amputation.types)
    
    return {
        "amputation": amputation_dict,
        "calibration": {
            "tol": config.calibration.tol,
            "max_iter": config.calibration.max_iter,
            "bound": config.calibration.bound,
        },
        "seed": config.seed,
        "block_size": config.block_size,
        "output_dir": config.output_dir,
    }
