"""OS command execution for the local networking stack."""
from .base import CommandRunner
from .linux import LinuxCommandRunner, parse_vlan_links
from .files import save_to_file

__all__ = [
    "CommandRunner",
    "LinuxCommandRunner",
    "parse_vlan_links",
    "save_to_file",
]
