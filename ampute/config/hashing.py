"""
ampute.config.hashing

Deterministic config hashing for reproducibility tracking.
"""

import hashlib
import json
from typing import Any, Dict

from .schema import AmputeConfig
from .load import config_to_dict


def hash_config(config: AmputeConfig) -> str:
    """Compute deterministic hash of configuration.
    
    output_dir is excluded: where logs go does not change the result.
    
    Returns:
        16-character hex string.
    """
    d = config_to_dict(config)
    d.pop("output_dir", None)
    return hash_dict(d)


def hash_dict(d: Dict[str, Any]) -> str:
    """Compute deterministic hash of dictionary.
    
    Keys are sorted for determinism.
    """
    json_str = json.dumps(d, sort_keys=True, separators=(",", ":"))
    
    # SHA256 hash, truncated to 16 chars
    h = hashlib.sha256(json_str.encode()).hexdigest()[:16]
    return h


def config_signature(config: AmputeConfig) -> str:
    """Generate human-readable signature for config.
    
    Format: {mechanism}_{rows|cells}_p{prop}_s{seed}_{hash}
    
    Example: "MAR_rows_p0.500_s42_a1b2c3d4e5f6a7b8"
    """
    h = hash_config(config)
    unit = "rows" if config.amputation.by_cases else "cells"
    return (
        f"{config.amputation.mechanism}_"
        f"{unit}_"
        f"p{config.amputation.prop:.3f}_"
        f"s{config.seed}_"
        f"{h}"
    )
