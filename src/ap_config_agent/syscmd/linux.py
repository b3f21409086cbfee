"""Linux command runner backed by iproute2.

VLANs on the uplink are plain 802.1Q links named ``<intf>.<vid>``; the
runner reads them back with ``ip -d -o link show type vlan``, which prints
one line per link:

    7: eth0.10@eth0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 ... \\
        vlan protocol 802.1Q id 10 <REORDER_HDR> ...
"""
import logging
import re
import subprocess

from ..errors import CommandError
from ..utils.logging_config import timed
from ..utils.retry import with_retry
from .base import CommandRunner

logger = logging.getLogger(__name__)

_LINK_RE = re.compile(r"^\d+:\s+(?P<name>[^@:\s]+)@(?P<parent>[^:\s]+):")
_VLAN_ID_RE = re.compile(r"\bvlan protocol 802\.1Q id (?P<vid>\d+)")


def parse_vlan_links(output: str, intf_name: str) -> list[int]:
    """Extract the VLAN IDs of links stacked on ``intf_name``.

    Args:
        output: Output of ``ip -d -o link show type vlan``
        intf_name: Parent interface (e.g. "eth0")

    Returns:
        Sorted, de-duplicated VLAN IDs
    """
    vids = set()
    for line in output.splitlines():
        link = _LINK_RE.match(line.strip())
        if not link or link.group("parent") != intf_name:
            continue
        vlan = _VLAN_ID_RE.search(line)
        if vlan:
            vids.add(int(vlan.group("vid")))
        else:
            logger.debug(f"Skipping link without 802.1Q id: {link.group('name')}")
    return sorted(vids)


class LinuxCommandRunner(CommandRunner):
    """Run commands with subprocess, bounded by a per-command timeout."""

    def __init__(self, timeout: float = 10, ip_binary: str = "ip"):
        self.timeout = timeout
        self.ip_binary = ip_binary

    def _run_once(self, args: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=False,
        )

    @with_retry(max_attempts=3)
    def _run_retried(self, args: list[str]) -> subprocess.CompletedProcess:
        return self._run_once(args)

    def run(self, args: list[str], retry: bool = False) -> str:
        """Run a command and return its stdout.

        Args:
            args: Command and arguments
            retry: Retry on timeout. Only safe for read-only commands; a
                mutation may have taken effect before the timeout fired.

        Raises:
            CommandError: If the command exits non-zero, times out or
                cannot be started
        """
        logger.debug(f"Running: {' '.join(args)}")
        try:
            proc = self._run_retried(args) if retry else self._run_once(args)
        except subprocess.TimeoutExpired as e:
            raise CommandError(args, -1, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise CommandError(args, 127, str(e)) from e

        if proc.returncode != 0:
            output = f"{proc.stdout}\n{proc.stderr}".strip()
            logger.debug(f"Command '{' '.join(args)}' failed (exit {proc.returncode}): {output}")
            raise CommandError(args, proc.returncode, output)
        return proc.stdout

    @timed("query_vlans")
    def query_vlans(self, intf_name: str) -> list[int]:
        output = self.run([self.ip_binary, "-d", "-o", "link", "show", "type", "vlan"], retry=True)
        return parse_vlan_links(output, intf_name)
