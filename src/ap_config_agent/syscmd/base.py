"""Command runner abstraction for the local networking stack."""
from abc import ABC, abstractmethod


class CommandRunner(ABC):
    """Executes OS-level networking commands."""

    @abstractmethod
    def run(self, args: list[str]) -> str:
        """Run a command and return its stdout.

        Raises:
            CommandError: If the command exits non-zero or cannot be started
        """

    @abstractmethod
    def query_vlans(self, intf_name: str) -> list[int]:
        """Return the VLAN IDs currently configured on top of an interface."""
