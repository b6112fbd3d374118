from .loader import config_search_paths, find_config_file, load_config
from .models import (
    ExclusionConfig,
    FenrirConfig,
    HashingConfig,
    LogConfig,
)

__all__ = [
    "ExclusionConfig",
    "FenrirConfig",
    "HashingConfig",
    "LogConfig",
    "config_search_paths",
    "find_config_file",
    "load_config",
]
