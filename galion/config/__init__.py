# Galion Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from galion.config.defaults import DEFAULT_CONFIG, generate_default_config
from galion.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    load_or_create_config,
    save_config,
    validate_config_file,
)
from galion.config.schema import (
    GalionConfig,
    JobsSettings,
    OutputConfig,
    RcloneSettings,
    RemoteRecord,
)

__all__ = [
    # Schema
    "GalionConfig",
    "RemoteRecord",
    "RcloneSettings",
    "JobsSettings",
    "OutputConfig",
    # Loader
    "load_config",
    "load_or_create_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
