"""Tests for the device configuration tree, locator and serializer."""
import json

import pytest
from pydantic import ValidationError

from ap_config_agent.config import (
    ConfigLocator,
    DeviceConfigTree,
    find_ap_config,
    load_config_file,
    vlan_ids,
)
from ap_config_agent.errors import ConfigFileError
from ap_config_agent.reconcile import emit_json


class TestDeviceConfigTree:
    """Tests for building the tree."""

    def test_from_dict(self, make_tree):
        """Nested offices, APs and SSIDs are parsed."""
        tree = make_tree(vlans=(10, 20))

        ap = tree.offices["hq"].aps["ap-1"]
        assert ap.hostname == "ap-1"
        assert [s.vlan_id for s in ap.ssids] == [10, 20]
        assert tree.gasket.radius_servers[0].auth_port == 1812

    def test_empty_tree(self):
        """A device with no offices is valid."""
        tree = DeviceConfigTree.from_dict({})

        assert tree.offices == {}
        assert tree.gasket is None

    def test_unknown_field_rejected(self):
        """Unexpected keys are reported as a config file error."""
        with pytest.raises(ConfigFileError):
            DeviceConfigTree.from_dict({"offices": {}, "bogus": 1})

    def test_frozen(self, make_tree):
        """The tree cannot be mutated."""
        tree = make_tree()

        with pytest.raises(ValidationError):
            tree.gasket = None

    def test_to_dict_drops_none(self, make_tree):
        """Unset optional fields are not emitted."""
        data = make_tree().to_dict()

        ssid = data["offices"]["hq"]["aps"]["ap-1"]["ssids"][0]
        assert "radius_server" not in ssid
        assert ssid["vlan_id"] == 10


class TestLocator:
    """Tests for the AP config lookup."""

    def test_find_by_hostname(self, make_tree):
        tree = make_tree(hostname="ap-lobby")

        assert find_ap_config(tree, "ap-lobby").name == "ap-1"

    def test_not_found(self, make_tree):
        assert find_ap_config(make_tree(), "ap-missing") is None

    def test_first_match_in_key_order(self):
        """With duplicate hostnames, the first office/AP in key order wins."""
        tree = DeviceConfigTree.from_dict({
            "offices": {
                "b-office": {"name": "b", "aps": {"x": {"name": "late", "hostname": "ap-1"}}},
                "a-office": {"name": "a", "aps": {"y": {"name": "early", "hostname": "ap-1"}}},
            },
        })

        assert find_ap_config(tree, "ap-1").name == "early"

    def test_vlan_ids(self, make_tree):
        """VLANs come from SSIDs, de-duplicated and sorted; SSIDs without VLAN skipped."""
        tree = DeviceConfigTree.from_dict({
            "offices": {"hq": {"name": "hq", "aps": {"ap": {
                "name": "ap",
                "hostname": "ap-1",
                "ssids": [
                    {"name": "a", "vlan_id": 30},
                    {"name": "b", "vlan_id": 10},
                    {"name": "c", "vlan_id": 30},
                    {"name": "guest"},
                ],
            }}}},
        })
        ap = find_ap_config(tree, "ap-1")

        assert vlan_ids(ap) == [10, 30]
        assert ConfigLocator().vlans(ap) == [10, 30]


class TestSerializer:
    """Tests for the canonical text form."""

    def test_two_space_indent_sorted_keys(self, make_tree):
        text = emit_json(make_tree())

        assert text.startswith('{\n  "gasket": {')
        assert text == json.dumps(json.loads(text), indent=2, sort_keys=True)

    def test_no_module_prefixes(self, make_tree):
        """Keys are bare field names."""
        data = json.loads(emit_json(make_tree()))

        assert set(data) == {"offices", "gasket"}
        assert all(":" not in key for key in data["offices"]["hq"]["aps"]["ap-1"])

    def test_stable(self, make_tree):
        """Equal trees render to identical text."""
        assert emit_json(make_tree()) == emit_json(make_tree())

    def test_text_loads_back(self, make_tree, tmp_path):
        """The persisted text is a valid input for a later reconciliation."""
        tree = make_tree(vlans=(5, 6))
        path = tmp_path / "ap_config.json"
        path.write_text(emit_json(tree))

        assert load_config_file(path) == tree


class TestLoadConfigFile:
    """Tests for load_config_file errors."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError, match="cannot read"):
            load_config_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigFileError, match="not valid JSON"):
            load_config_file(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(ConfigFileError, match="JSON object"):
            load_config_file(path)
