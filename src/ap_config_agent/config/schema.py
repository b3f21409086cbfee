"""Device configuration tree pushed by the management protocol.

The tree is rooted at the device and holds zero or more offices, each with
its access points, plus the shared transport/security sub-structure
("gasket"). Models are frozen: a reconciliation reads the tree, never
mutates it.
"""
import json
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigFileError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Radio(_Frozen):
    """Radio settings for one physical radio of an AP."""
    id: int
    operating_frequency: Literal["2.4GHz", "5GHz"] = "2.4GHz"
    channel: Optional[int] = None
    transmit_power: Optional[int] = None
    enabled: bool = True


class SSID(_Frozen):
    """A wireless network served by an AP."""
    name: str
    enabled: bool = True
    hidden: bool = False
    vlan_id: Optional[int] = None
    operating_frequency: Literal["2.4GHz", "5GHz", "dual"] = "dual"
    wpa_protocol: Literal["open", "wpa2-personal", "wpa2-enterprise"] = "open"
    wpa2_psk: Optional[str] = None
    radius_server: Optional[str] = None


class APConfig(_Frozen):
    """Configuration for exactly one access point, keyed by hostname."""
    name: str
    hostname: str
    radios: list[Radio] = Field(default_factory=list)
    ssids: list[SSID] = Field(default_factory=list)


class Office(_Frozen):
    name: str
    aps: dict[str, APConfig] = Field(default_factory=dict)


class RadiusServer(_Frozen):
    id: str
    host: str
    secret: str
    auth_port: int = 1812
    acct_port: int = 1813


class Gasket(_Frozen):
    """Shared transport/security configuration applied alongside an AP."""
    radius_servers: list[RadiusServer] = Field(default_factory=list)

    def radius_server(self, server_id: str) -> Optional[RadiusServer]:
        for server in self.radius_servers:
            if server.id == server_id:
                return server
        return None


class DeviceConfigTree(_Frozen):
    """Full validated configuration for the device."""
    offices: dict[str, Office] = Field(default_factory=dict)
    gasket: Optional[Gasket] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceConfigTree":
        """Build a tree from a plain dict.

        Raises:
            ConfigFileError: If the dict does not fit the model
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigFileError(f"invalid device configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Plain dict form with unset optional fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)


def load_config_file(path: Union[str, Path]) -> DeviceConfigTree:
    """Load a device configuration tree from a JSON file.

    Accepts the canonical text written by the config store, so a persisted
    configuration can be fed back in as the input of a later reconciliation.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ConfigFileError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigFileError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigFileError(f"{path} must contain a JSON object")
    return DeviceConfigTree.from_dict(data)
