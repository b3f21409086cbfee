"""Persistence of the last accepted configuration."""
from .store import ConfigStore, AP_CONFIG_FILE_NAME

__all__ = [
    "ConfigStore",
    "AP_CONFIG_FILE_NAME",
]
