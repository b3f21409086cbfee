"""Service boundaries used by the reconciler."""
from abc import ABC, abstractmethod
from typing import Optional

from ..config.schema import APConfig, Gasket


class CleanupService(ABC):
    """Tears down existing interface configuration."""

    @abstractmethod
    def cleanup(self, intf_name: str, vlan_ids: list[int]) -> None:
        """Remove the given VLANs from an interface. Best effort, never raises
        for an individual command failure."""


class ApplyService(ABC):
    """Applies an AP configuration to the device."""

    @abstractmethod
    def apply(
        self,
        ap_config: APConfig,
        gasket: Optional[Gasket],
        reset_intf: bool,
        eth_intf_name: str,
        wlan_intf_name: str,
    ) -> None:
        """Bring the device in line with ``ap_config``.

        Raises:
            ApplyError: If any part of the configuration could not be applied
        """
