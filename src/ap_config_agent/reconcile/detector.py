"""VLAN change detection on the uplink interface.

VLAN membership changes need the kernel interface torn down and rebuilt,
and that is only safe for the whole interface at once. Any difference
between the live and the desired set therefore resets everything that is
currently configured; identical sets leave the interface alone.
"""
from collections.abc import Iterable

from .schema import VLANChange


def vlan_set_changed(existing: Iterable[int], desired: Iterable[int]) -> bool:
    """True if the two VLAN collections differ, ignoring order and duplicates."""
    return set(existing) != set(desired)


def detect_change(existing: Iterable[int], desired: Iterable[int]) -> VLANChange:
    """Decide whether the uplink needs a reset.

    Args:
        existing: VLANs currently active on the interface
        desired: VLANs implied by the new AP configuration

    Returns:
        VLANChange; on a reset, ``vlans_to_cleanup`` is the full existing set
    """
    existing = sorted(set(existing))
    if not vlan_set_changed(existing, desired):
        return VLANChange(reset_required=False, vlans_to_cleanup=[])
    return VLANChange(reset_required=True, vlans_to_cleanup=existing)
