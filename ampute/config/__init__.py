"""
ampute.config

Configuration management for ampute.

Exports:
- Config schemas
- Loading/saving utilities
- Hashing for reproducibility
"""

from .schema import (
    AmputeConfig,
    AmputationConfig,
    CalibrationConfig,
)

from .load import (
    load_config,
    save_config,
    config_from_dict,
    config_to_dict,
)

from .hashing import (
    hash_config,
    hash_dict,
    config_signature,
)

__all__ = [
    # Schemas
    "AmputeConfig",
    "AmputationConfig",
    "CalibrationConfig",
    # Load/save
    "load_config",
    "save_config",
    "config_from_dict",
    "config_to_dict",
    # Hashing
    "hash_config",
    "hash_dict",
    "config_signature",
]
