"""Exception hierarchy for the AP config agent."""
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failed reconciliation."""
    SHAPE_MISMATCH = "shape_mismatch"
    SERIALIZATION = "serialization"
    LOCATOR_MISS = "locator_miss"
    VLAN_QUERY = "vlan_query"
    APPLY = "apply"
    PERSISTENCE = "persistence"
    RUNTIME_FAULT = "runtime_fault"


class AgentError(Exception):
    """Base exception for all agent errors."""


class ConfigFileError(AgentError):
    """Raised when a configuration file cannot be read or parsed."""


class CommandError(AgentError):
    """Raised when an OS networking command fails."""

    def __init__(self, args: list[str], returncode: int, output: str = ""):
        self.command = args
        self.returncode = returncode
        self.output = output
        message = f"command {' '.join(args)!r} failed (exit {returncode})"
        if output:
            message += f": {output}"
        super().__init__(message)


class ReconcileError(AgentError):
    """Raised by a reconciliation step. Carries the error kind."""
    kind: ErrorKind = ErrorKind.RUNTIME_FAULT


class ConfigShapeError(ReconcileError):
    kind = ErrorKind.SHAPE_MISMATCH


class SerializationError(ReconcileError):
    kind = ErrorKind.SERIALIZATION


class LocatorMissError(ReconcileError):
    """No sub-configuration matches this device's hostname."""
    kind = ErrorKind.LOCATOR_MISS

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"not found the configuration for this AP (hostname = {hostname})")


class VLANQueryError(ReconcileError):
    kind = ErrorKind.VLAN_QUERY


class ApplyError(ReconcileError):
    kind = ErrorKind.APPLY


class PersistenceError(ReconcileError):
    kind = ErrorKind.PERSISTENCE
