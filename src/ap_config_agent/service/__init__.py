"""Cleanup and apply services."""
from .base import ApplyService, CleanupService
from .hostapd import bridge_name, render_hostapd_config
from .network import NetworkService

__all__ = [
    "ApplyService",
    "CleanupService",
    "NetworkService",
    "bridge_name",
    "render_hostapd_config",
]
