"""
ampute.data

Input conversion and column transforms.
"""

from .ingestion import (
    as_data_tensor,
    as_matrix_tensor,
    as_vector_tensor,
    feature_names_of,
)

from .normalization import (
    NormalizationStats,
    compute_normalization_stats,
    standardize_columns,
    rank_transform,
    prepare_scoring_data,
)

__all__ = [
    # Ingestion
    "as_data_tensor",
    "as_matrix_tensor",
    "as_vector_tensor",
    "feature_names_of",
    # Normalization
    "NormalizationStats",
    "compute_normalization_stats",
    "standardize_columns",
    "rank_transform",
    "prepare_scoring_data",
]
