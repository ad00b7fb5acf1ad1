from .loader import load_config, merge_cli, validate
from .types import ConfigError, PoolConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "merge_cli",
    "validate",
    "PoolConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
