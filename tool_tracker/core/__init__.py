# Core package initialization
# Configuration, logging, exceptions and validation primitives shared
# by every other layer.

from . import config, exceptions, logging_config, validation

__all__ = [
    "config",
    "exceptions",
    "logging_config",
    "validation",
]
