"""Device identity and agent settings loaded from YAML.

Example ``agent.yaml``:

```yaml
hostname: ap-office-1
eth_intf: eth0
wlan_intf: wlan0
run_folder: /var/run/ap-config-agent
```

Environment variables override the file:
    AP_AGENT_CONFIG: Path to the YAML file
    AP_AGENT_HOSTNAME, AP_AGENT_ETH_INTF, AP_AGENT_WLAN_INTF
    AP_AGENT_RUN_FOLDER
"""
import logging
import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

from ..errors import ConfigFileError

logger = logging.getLogger(__name__)

DEFAULT_ETH_INTF = "eth0"
DEFAULT_WLAN_INTF = "wlan0"
DEFAULT_RUN_FOLDER = Path("/var/run/ap-config-agent")


@dataclass(frozen=True)
class DeviceIdentity:
    """Read-only description of the local device."""
    hostname: str
    eth_intf_name: str = DEFAULT_ETH_INTF
    wlan_intf_name: str = DEFAULT_WLAN_INTF


@dataclass(frozen=True)
class AgentSettings:
    """Identity plus where the agent keeps its runtime files."""
    identity: DeviceIdentity
    run_folder: Path = DEFAULT_RUN_FOLDER
    config_path: Optional[Path] = None


def _find_config() -> Optional[Path]:
    """Find agent.yaml, or None if there is none."""
    env_path = os.environ.get("AP_AGENT_CONFIG")
    if env_path:
        return Path(env_path)

    search_paths = [
        Path.cwd() / "configs" / "agent.yaml",
        Path.cwd() / "agent.yaml",
        Path.home() / ".config" / "ap-config-agent" / "agent.yaml",
        Path("/etc/ap-config-agent/agent.yaml"),
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_settings(path: Optional[Union[str, Path]] = None) -> AgentSettings:
    """Load agent settings.

    Args:
        path: YAML file to read. Searched for when omitted; a missing file
            means built-in defaults.

    Raises:
        ConfigFileError: If the file exists but cannot be parsed
    """
    config_path = Path(path) if path else _find_config()
    data: dict = {}

    if config_path is not None:
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigFileError(f"cannot read {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigFileError(f"invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigFileError(f"{config_path} must contain a mapping")
        logger.debug(f"Loaded agent settings from {config_path}")

    hostname = os.environ.get("AP_AGENT_HOSTNAME") or data.get("hostname") or socket.gethostname()
    identity = DeviceIdentity(
        hostname=str(hostname),
        eth_intf_name=os.environ.get("AP_AGENT_ETH_INTF") or data.get("eth_intf", DEFAULT_ETH_INTF),
        wlan_intf_name=os.environ.get("AP_AGENT_WLAN_INTF") or data.get("wlan_intf", DEFAULT_WLAN_INTF),
    )
    run_folder = os.environ.get("AP_AGENT_RUN_FOLDER") or data.get("run_folder") or DEFAULT_RUN_FOLDER

    return AgentSettings(
        identity=identity,
        run_folder=Path(run_folder),
        config_path=config_path,
    )


def load_identity(path: Optional[Union[str, Path]] = None) -> DeviceIdentity:
    """Load just the device identity."""
    return load_settings(path).identity
