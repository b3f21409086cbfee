"""Default cleanup/apply services for a Linux access point.

Each VLAN on the uplink becomes an 802.1Q link ``<eth>.<vid>`` enslaved to
a bridge ``br<vid>``; hostapd attaches SSIDs to those bridges.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from ..config.locator import vlan_ids as desired_vlan_ids
from ..config.schema import APConfig, Gasket
from ..errors import ApplyError, CommandError
from ..syscmd.base import CommandRunner
from ..syscmd.files import save_to_file
from ..utils.logging_config import timed
from .base import ApplyService, CleanupService
from .hostapd import bridge_name, render_hostapd_config

logger = logging.getLogger(__name__)

HOSTAPD_CONFIG_FILE_NAME = "hostapd.conf"
HOSTAPD_PID_FILE_NAME = "hostapd.pid"


class NetworkService(CleanupService, ApplyService):
    """iproute2 + hostapd implementation of the cleanup and apply services."""

    def __init__(
        self,
        runner: CommandRunner,
        run_folder: Union[str, Path],
        ip_binary: str = "ip",
        hostapd_binary: str = "hostapd",
    ):
        self.runner = runner
        self.run_folder = Path(run_folder)
        self.ip_binary = ip_binary
        self.hostapd_binary = hostapd_binary

    # === Cleanup ===

    @timed("cleanup")
    def cleanup(self, intf_name: str, vlan_ids: list[int]) -> None:
        if not vlan_ids:
            logger.debug(f"Nothing to clean up on {intf_name}")
            return

        logger.info(f"Removing VLANs {vlan_ids} from {intf_name}")
        self._stop_hostapd()
        for vid in vlan_ids:
            for link in (bridge_name(vid), f"{intf_name}.{vid}"):
                try:
                    self.runner.run([self.ip_binary, "link", "delete", link])
                except CommandError as e:
                    logger.warning(f"Failed to delete {link}: {e}")

    # === Apply ===

    @timed("apply")
    def apply(
        self,
        ap_config: APConfig,
        gasket: Optional[Gasket],
        reset_intf: bool,
        eth_intf_name: str,
        wlan_intf_name: str,
    ) -> None:
        # Rendered first: a config hostapd cannot serve leaves the uplink untouched
        text = render_hostapd_config(ap_config, gasket, wlan_intf_name)
        try:
            if reset_intf:
                for vid in desired_vlan_ids(ap_config):
                    self._create_vlan(eth_intf_name, vid)
            self._configure_hostapd(ap_config.hostname, text, wlan_intf_name)
        except CommandError as e:
            raise ApplyError(str(e)) from e
        except OSError as e:
            raise ApplyError(f"failed to write hostapd configuration: {e}") from e

    def _create_vlan(self, eth_intf_name: str, vid: int) -> None:
        link = f"{eth_intf_name}.{vid}"
        bridge = bridge_name(vid)
        logger.info(f"Creating VLAN {vid}: {link} -> {bridge}")

        commands = [
            [self.ip_binary, "link", "add", "link", eth_intf_name, "name", link, "type", "vlan", "id", str(vid)],
            [self.ip_binary, "link", "add", "name", bridge, "type", "bridge"],
            [self.ip_binary, "link", "set", link, "master", bridge],
            [self.ip_binary, "link", "set", link, "up"],
            [self.ip_binary, "link", "set", bridge, "up"],
        ]
        for cmd in commands:
            self.runner.run(cmd)

    def _configure_hostapd(self, hostname: str, text: Optional[str], wlan_intf_name: str) -> None:
        self._stop_hostapd()
        if text is None:
            logger.info(f"No enabled SSID for {hostname}, hostapd left stopped")
            return

        conf_path = save_to_file(self.run_folder, HOSTAPD_CONFIG_FILE_NAME, text)
        pid_path = self.run_folder / HOSTAPD_PID_FILE_NAME
        self.runner.run([self.hostapd_binary, "-B", "-P", str(pid_path), str(conf_path)])
        logger.info(f"Started hostapd on {wlan_intf_name} with {conf_path}")

    def _stop_hostapd(self) -> None:
        try:
            self.runner.run(["pkill", "-x", self.hostapd_binary])
        except CommandError as e:
            # pkill exits 1 when nothing matched
            if e.returncode != 1:
                logger.warning(f"Failed to stop hostapd: {e}")
