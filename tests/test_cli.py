"""Tests for the command line."""
import json
from pathlib import Path

import pytest

from ap_config_agent import cli
from ap_config_agent.reconcile import Reconciler, emit_json

from conftest import FakeApplier, FakeCleanup, FakeRunner


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Agent settings file, fake collaborators, and a quiet logging setup."""
    monkeypatch.setattr(cli, "setup_logging", lambda: None)
    monkeypatch.setattr(cli, "setup_audit_logging", lambda log_dir: None)

    run_folder = tmp_path / "run"
    settings_file = tmp_path / "agent.yaml"
    settings_file.write_text(f"hostname: ap-1\neth_intf: eth0\nwlan_intf: wlan0\nrun_folder: {run_folder}\n")

    runner = FakeRunner(vlans=[10])
    applier = FakeApplier(runner)

    def factory(settings):
        from ap_config_agent.config_store import ConfigStore

        return Reconciler(
            settings.identity, runner, FakeCleanup(), applier,
            ConfigStore(settings.run_folder), sleep=lambda s: None,
        )

    return {
        "tmp_path": tmp_path,
        "run_folder": run_folder,
        "settings": settings_file,
        "runner": runner,
        "factory": factory,
    }


class TestCli:
    """Tests for cli.main."""

    def test_apply(self, env, make_tree, capsys):
        config_file = env["tmp_path"] / "office.json"
        config_file.write_text(emit_json(make_tree(vlans=(10, 20))))

        code = cli.main(["--identity", str(env["settings"]), "apply", str(config_file)], factory=env["factory"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["success"] is True
        assert out["reset_required"] is True
        assert (env["run_folder"] / "ap_config.json").read_text() == config_file.read_text()

    def test_apply_failure_exit_code(self, env, make_tree, capsys):
        config_file = env["tmp_path"] / "office.json"
        config_file.write_text(emit_json(make_tree(hostname="someone-else")))

        code = cli.main(["--identity", str(env["settings"]), "apply", str(config_file)], factory=env["factory"])

        out = json.loads(capsys.readouterr().out)
        assert code == 1
        assert out["error_kind"] == "locator_miss"

    def test_apply_bad_file(self, env, capsys):
        code = cli.main(
            ["--identity", str(env["settings"]), "apply", str(env["tmp_path"] / "missing.json")],
            factory=env["factory"],
        )

        assert code == 2
        assert "cannot read" in capsys.readouterr().err

    def test_restore_reapplies_stored_config(self, env, make_tree, capsys):
        env["run_folder"].mkdir()
        (env["run_folder"] / "ap_config.json").write_text(emit_json(make_tree(vlans=(10,))))

        code = cli.main(["--identity", str(env["settings"]), "restore"], factory=env["factory"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["reset_required"] is False

    def test_restore_without_stored_config(self, env, capsys):
        code = cli.main(["--identity", str(env["settings"]), "restore"], factory=env["factory"])

        assert code == 1
        assert "No stored configuration" in capsys.readouterr().err

    def test_restore_unreadable_stored_config(self, env, make_tree, monkeypatch, capsys):
        """A stored file that exists but cannot be read is reported as such."""
        env["run_folder"].mkdir()
        (env["run_folder"] / "ap_config.json").write_text(emit_json(make_tree()))

        read_text = Path.read_text

        def deny_stored(self, *args, **kwargs):
            if self.name == "ap_config.json":
                raise PermissionError(13, "Permission denied", str(self))
            return read_text(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", deny_stored)

        code = cli.main(["--identity", str(env["settings"]), "restore"], factory=env["factory"])

        err = capsys.readouterr().err
        assert code == 2
        assert "No stored configuration" not in err
        assert "Permission denied" in err

    def test_vlans(self, env, monkeypatch, capsys):
        monkeypatch.setattr(cli.LinuxCommandRunner, "query_vlans", lambda self, intf: [10, 20])

        code = cli.main(["--identity", str(env["settings"]), "vlans"], factory=env["factory"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"interface": "eth0", "vlans": [10, 20]}

    def test_command_required(self, env):
        with pytest.raises(SystemExit):
            cli.main([], factory=env["factory"])
