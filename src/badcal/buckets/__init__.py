"""Pure hour-bucket reconciliation helpers."""

from .reconcile import (
    Advisory,
    BucketContext,
    BucketStats,
    BucketUpdate,
    BucketViewModel,
    build_bucket_view_models,
    index_by_bucket,
    normalize_hours,
    set_count_for_bucket,
)

__all__ = [
    "Advisory",
    "BucketContext",
    "BucketStats",
    "BucketUpdate",
    "BucketViewModel",
    "build_bucket_view_models",
    "index_by_bucket",
    "normalize_hours",
    "set_count_for_bucket",
]
