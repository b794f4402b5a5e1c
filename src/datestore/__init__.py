"""Persist "the last time something happened" per key in a JSON file.

Provides DateStore, a small file-backed key -> timestamp store with
natural-language comparisons ("10 minutes ago", "1 day from now").
"""

from datestore.comparison import Comparison, ComparisonResult
from datestore.config import StoreConfig
from datestore.errors import (
    ConfigurationError,
    DateStoreError,
    InvalidDateError,
    StoreAccessError,
)
from datestore.store import DateStore

__version__ = "0.1.0"

__all__ = [
    "DateStore",
    "StoreConfig",
    "Comparison",
    "ComparisonResult",
    "DateStoreError",
    "ConfigurationError",
    "StoreAccessError",
    "InvalidDateError",
]
