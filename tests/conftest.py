"""Shared fakes for the reconciler's collaborators."""
from typing import Optional

import pytest

from ap_config_agent.config.identity import DeviceIdentity
from ap_config_agent.config.locator import vlan_ids
from ap_config_agent.config.schema import APConfig, DeviceConfigTree, Gasket
from ap_config_agent.config_store import ConfigStore
from ap_config_agent.reconcile import Reconciler
from ap_config_agent.service.base import ApplyService, CleanupService
from ap_config_agent.syscmd.base import CommandRunner


class FakeRunner(CommandRunner):
    """Command runner with a scripted VLAN table."""

    def __init__(self, vlans=None, error: Optional[Exception] = None):
        self.vlans = list(vlans or [])
        self.error = error
        self.queries: list[str] = []
        self.commands: list[list[str]] = []

    def run(self, args):
        self.commands.append(list(args))
        return ""

    def query_vlans(self, intf_name):
        self.queries.append(intf_name)
        if self.error:
            raise self.error
        return list(self.vlans)


class FakeCleanup(CleanupService):
    def __init__(self):
        self.calls: list[tuple[str, list[int]]] = []

    def cleanup(self, intf_name, vlan_ids):
        self.calls.append((intf_name, list(vlan_ids)))


class FakeApplier(ApplyService):
    """Records apply calls; on a reset, the live VLANs become the desired ones."""

    def __init__(self, runner: Optional[FakeRunner] = None, error: Optional[Exception] = None):
        self.runner = runner
        self.error = error
        self.calls: list[tuple] = []

    def apply(self, ap_config: APConfig, gasket: Optional[Gasket], reset_intf, eth_intf_name, wlan_intf_name):
        self.calls.append((ap_config, gasket, reset_intf, eth_intf_name, wlan_intf_name))
        if self.error:
            raise self.error
        if reset_intf and self.runner is not None:
            self.runner.vlans = vlan_ids(ap_config)


def build_tree(hostname: str = "ap-1", vlans=(10, 20)) -> DeviceConfigTree:
    """A one-office tree with one SSID per VLAN."""
    return DeviceConfigTree.from_dict({
        "offices": {
            "hq": {
                "name": "hq",
                "aps": {
                    "ap-1": {
                        "name": "ap-1",
                        "hostname": hostname,
                        "radios": [
                            {"id": 0, "operating_frequency": "2.4GHz", "channel": 6},
                        ],
                        "ssids": [
                            {
                                "name": f"corp-{vid}",
                                "vlan_id": vid,
                                "wpa_protocol": "wpa2-personal",
                                "wpa2_psk": "correct-horse",
                            }
                            for vid in vlans
                        ],
                    },
                },
            },
        },
        "gasket": {
            "radius_servers": [
                {"id": "radius-1", "host": "10.0.0.5", "secret": "s3cret"},
            ],
        },
    })


@pytest.fixture
def make_tree():
    return build_tree


@pytest.fixture
def identity():
    return DeviceIdentity(hostname="ap-1", eth_intf_name="eth0", wlan_intf_name="wlan0")


@pytest.fixture
def runner():
    return FakeRunner(vlans=[10, 20])


@pytest.fixture
def cleanup():
    return FakeCleanup()


@pytest.fixture
def applier(runner):
    return FakeApplier(runner)


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "run")


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def reconciler(identity, runner, cleanup, applier, store, sleeps):
    return Reconciler(
        identity=identity,
        runner=runner,
        cleanup=cleanup,
        applier=applier,
        store=store,
        sleep=sleeps.append,
    )
