#!/usr/bin/env python3
"""AP config agent command line.

Usage:
    ap-config-agent apply CONFIG.json [--identity agent.yaml]
    ap-config-agent restore [--identity agent.yaml]
    ap-config-agent vlans [--identity agent.yaml]

Environment variables:
    AP_AGENT_CONFIG         Agent settings file (hostname, interfaces, run folder)
    AP_AGENT_LOG_LEVEL      Console log level (default: INFO)
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from .config.identity import AgentSettings, load_settings
from .config.schema import DeviceConfigTree, load_config_file
from .config_store.store import ConfigStore
from .errors import AgentError
from .reconcile.engine import Reconciler
from .syscmd.linux import LinuxCommandRunner
from .utils.audit_log import setup_audit_logging
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

ReconcilerFactory = Callable[[AgentSettings], Reconciler]


def _reconcile(tree: DeviceConfigTree, settings: AgentSettings, factory: ReconcilerFactory) -> int:
    outcome = factory(settings).handle_config_update(tree)
    print(json.dumps(outcome.to_dict(), indent=2))
    return 0 if outcome.success else 1


def cmd_apply(args: argparse.Namespace, settings: AgentSettings, factory: ReconcilerFactory) -> int:
    tree = load_config_file(args.config)
    return _reconcile(tree, settings, factory)


def cmd_restore(args: argparse.Namespace, settings: AgentSettings, factory: ReconcilerFactory) -> int:
    store = ConfigStore(settings.run_folder)
    if store.load() is None:
        print(f"No stored configuration at {store.path}", file=sys.stderr)
        return 1
    tree = load_config_file(store.path)
    return _reconcile(tree, settings, factory)


def cmd_vlans(args: argparse.Namespace, settings: AgentSettings, factory: ReconcilerFactory) -> int:
    intf = settings.identity.eth_intf_name
    vlans = LinuxCommandRunner().query_vlans(intf)
    print(json.dumps({"interface": intf, "vlans": vlans}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ap-config-agent",
        description="Reconcile this access point against a device configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Apply a configuration file
    ap-config-agent apply office.json

    # Re-apply the last accepted configuration after a reboot
    ap-config-agent restore
""",
    )
    parser.add_argument(
        "--identity",
        type=Path,
        default=None,
        help="Agent settings YAML (default: search AP_AGENT_CONFIG, ./configs/agent.yaml, ...)",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for the audit log (default: ~/.ap-config-agent)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    apply_parser = sub.add_parser("apply", help="Apply a configuration file")
    apply_parser.add_argument("config", type=Path, help="Device configuration JSON")
    apply_parser.set_defaults(func=cmd_apply)

    restore_parser = sub.add_parser("restore", help="Re-apply the stored configuration")
    restore_parser.set_defaults(func=cmd_restore)

    vlans_parser = sub.add_parser("vlans", help="Show VLANs active on the uplink")
    vlans_parser.set_defaults(func=cmd_vlans)

    return parser


def main(
    argv: Optional[list[str]] = None,
    factory: ReconcilerFactory = Reconciler.from_settings,
) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    setup_logging()
    setup_audit_logging(args.log_dir)

    try:
        settings = load_settings(args.identity)
        return args.func(args, settings, factory)
    except AgentError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
