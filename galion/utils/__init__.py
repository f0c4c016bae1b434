# Galion Utilities Module
# Logging setup

from galion.utils.logging import parse_level, setup_logging

__all__ = [
    "parse_level",
    "setup_logging",
]
