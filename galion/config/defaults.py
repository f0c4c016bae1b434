# Galion Default Configuration
# Default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "remotes": [],
    "rclone": {
        "url": "http://127.0.0.1:5572",
        "timeout": 30.0,
        "spawn": False,
        "binary": "rclone",
        "ask_password": False,
    },
    "jobs": {
        "poll_interval": 0.5,
        "refresh_interval": 1.0,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "hide_banner": False,
        "log_level": "INFO",
        "log_file": "~/.config/galion/galion.log",
    },
}


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# Galion - rclone sync remotes configuration
#
# remotes:   user defined sync targets
#            - remote_name: backup
#              source_locator: /data
#              destination_locator: "remote:bucket"
# rclone:    how to reach the rclone rc API ('rclone rcd')
#            set spawn: true to let galion start rclone itself
# jobs:      job polling interval (seconds)
#
# Remotes found in the rclone configuration are added at start-up and are
# never written to this file.

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
