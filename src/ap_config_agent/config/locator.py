"""Locate this device's sub-configuration inside a device tree."""
from typing import Optional

from .schema import APConfig, DeviceConfigTree


def find_ap_config(tree: DeviceConfigTree, hostname: str) -> Optional[APConfig]:
    """Return the AP config whose hostname matches, or None.

    Offices and APs are scanned in key order; the first match wins.
    """
    for office_name in sorted(tree.offices):
        office = tree.offices[office_name]
        for ap_name in sorted(office.aps):
            ap = office.aps[ap_name]
            if ap.hostname == hostname:
                return ap
    return None


def vlan_ids(ap_config: APConfig) -> list[int]:
    """VLAN IDs implied by an AP config, one per SSID that sets one."""
    return sorted({ssid.vlan_id for ssid in ap_config.ssids if ssid.vlan_id is not None})


class ConfigLocator:
    """Lookup capability handed to the reconciler."""

    def find(self, tree: DeviceConfigTree, hostname: str) -> Optional[APConfig]:
        return find_ap_config(tree, hostname)

    def vlans(self, ap_config: APConfig) -> list[int]:
        return vlan_ids(ap_config)
