"""Render a hostapd configuration from an AP config."""
from typing import Optional

from ..config.schema import APConfig, Gasket, Radio, SSID
from ..errors import ApplyError

HW_MODES = {"2.4GHz": "g", "5GHz": "a"}


def bridge_name(vlan_id: int) -> str:
    """Name of the bridge that joins a VLAN link and its SSID."""
    return f"br{vlan_id}"


def _primary_radio(ap_config: APConfig) -> Optional[Radio]:
    for radio in sorted(ap_config.radios, key=lambda r: r.id):
        if radio.enabled:
            return radio
    return None


def _ssid_serves(ssid: SSID, radio: Optional[Radio]) -> bool:
    if radio is None or ssid.operating_frequency == "dual":
        return True
    return ssid.operating_frequency == radio.operating_frequency


def _security_lines(ssid: SSID, gasket: Optional[Gasket]) -> list[str]:
    if ssid.wpa_protocol == "open":
        return []

    lines = ["wpa=2", "rsn_pairwise=CCMP"]
    if ssid.wpa_protocol == "wpa2-personal":
        if not ssid.wpa2_psk:
            raise ApplyError(f"SSID {ssid.name} uses wpa2-personal but has no passphrase")
        lines += ["wpa_key_mgmt=WPA-PSK", f"wpa_passphrase={ssid.wpa2_psk}"]
        return lines

    # wpa2-enterprise: authenticate against a RADIUS server from the gasket
    servers = gasket.radius_servers if gasket else []
    if ssid.radius_server:
        server = gasket.radius_server(ssid.radius_server) if gasket else None
    else:
        server = servers[0] if servers else None
    if server is None:
        wanted = f"RADIUS server {ssid.radius_server!r}" if ssid.radius_server else "RADIUS server"
        raise ApplyError(f"SSID {ssid.name} uses wpa2-enterprise but no {wanted} is configured")
    lines += [
        "wpa_key_mgmt=WPA-EAP",
        "ieee8021x=1",
        f"auth_server_addr={server.host}",
        f"auth_server_port={server.auth_port}",
        f"auth_server_shared_secret={server.secret}",
        f"acct_server_addr={server.host}",
        f"acct_server_port={server.acct_port}",
        f"acct_server_shared_secret={server.secret}",
    ]
    return lines


def render_hostapd_config(
    ap_config: APConfig,
    gasket: Optional[Gasket],
    wlan_intf_name: str,
) -> Optional[str]:
    """Build hostapd.conf text for the AP.

    The first enabled SSID owns the wireless interface; each further SSID
    gets its own BSS (``<wlan>_1``, ``<wlan>_2``, ...). SSIDs with a VLAN
    are attached to that VLAN's bridge.

    The wireless interface runs the first enabled radio; every enabled SSID
    must fit that radio's band.

    Returns:
        The configuration text, or None when no SSID is enabled.

    Raises:
        ApplyError: If an enabled SSID is on another band, or its security
            settings cannot be satisfied
    """
    radio = _primary_radio(ap_config)
    ssids = [s for s in ap_config.ssids if s.enabled]
    if not ssids:
        return None

    unserved = [s.name for s in ssids if not _ssid_serves(s, radio)]
    if unserved:
        raise ApplyError(
            f"SSIDs {unserved} cannot be served: {wlan_intf_name} runs the "
            f"{radio.operating_frequency} radio {radio.id}"
        )

    lines = [
        f"# hostapd configuration for {ap_config.hostname}",
        "driver=nl80211",
        "ctrl_interface=/var/run/hostapd",
        f"hw_mode={HW_MODES[radio.operating_frequency] if radio else 'g'}",
        f"channel={radio.channel if radio and radio.channel else 0}",
    ]
    if radio and radio.operating_frequency == "5GHz":
        lines += ["ieee80211n=1", "ieee80211ac=1"]
    else:
        lines.append("ieee80211n=1")

    for index, ssid in enumerate(ssids):
        lines.append("")
        if index == 0:
            lines.append(f"interface={wlan_intf_name}")
        else:
            lines.append(f"bss={wlan_intf_name}_{index}")
        lines.append(f"ssid={ssid.name}")
        if ssid.hidden:
            lines.append("ignore_broadcast_ssid=1")
        if ssid.vlan_id is not None:
            lines.append(f"bridge={bridge_name(ssid.vlan_id)}")
        lines += _security_lines(ssid, gasket)

    return "\n".join(lines) + "\n"
