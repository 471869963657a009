# kr_tracker/config/__init__.py
"""Configuration system for kr-tracker."""

from .loader import get_config_path, load_config
from .schema import (
    DeletionConfig,
    KrTrackerConfig,
    OutputConfig,
    StoreConfig,
)

__all__ = [
    "KrTrackerConfig",
    "OutputConfig",
    "StoreConfig",
    "DeletionConfig",
    "load_config",
    "get_config_path",
]
