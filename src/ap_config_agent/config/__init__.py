"""Device configuration tree, lookup and local identity."""
from .schema import (
    DeviceConfigTree,
    Office,
    APConfig,
    Radio,
    SSID,
    Gasket,
    RadiusServer,
    load_config_file,
)
from .locator import ConfigLocator, find_ap_config, vlan_ids
from .identity import AgentSettings, DeviceIdentity, load_identity, load_settings

__all__ = [
    "DeviceConfigTree",
    "Office",
    "APConfig",
    "Radio",
    "SSID",
    "Gasket",
    "RadiusServer",
    "load_config_file",
    "ConfigLocator",
    "find_ap_config",
    "vlan_ids",
    "AgentSettings",
    "DeviceIdentity",
    "load_identity",
    "load_settings",
]
