"""Result types for the reconciler."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import ErrorKind


class ReconcileState(str, Enum):
    """Steps of one reconciliation, in order."""
    IDLE = "idle"
    TYPE_CHECKED = "type_checked"
    SERIALIZED = "serialized"
    LOCATED = "located"
    VLAN_QUERIED = "vlan_queried"
    CLEANED_UP = "cleaned_up"
    SKIPPED_CLEANUP = "skipped_cleanup"
    SETTLED = "settled"
    APPLIED = "applied"
    PERSISTED = "persisted"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class VLANChange:
    """Verdict of the change detector."""
    reset_required: bool
    vlans_to_cleanup: list[int] = field(default_factory=list)


@dataclass
class ReconciliationOutcome:
    """Terminal result of one reconciliation attempt."""
    success: bool
    state: ReconcileState
    reset_required: bool = False
    config_text: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    failed_at: Optional[ReconcileState] = None

    @classmethod
    def done(cls, reset_required: bool, config_text: str) -> "ReconciliationOutcome":
        return cls(
            success=True,
            state=ReconcileState.DONE,
            reset_required=reset_required,
            config_text=config_text,
        )

    @classmethod
    def failed(
        cls,
        kind: ErrorKind,
        error: str,
        failed_at: Optional[ReconcileState] = None,
    ) -> "ReconciliationOutcome":
        return cls(
            success=False,
            state=ReconcileState.FAILED,
            error_kind=kind,
            error=error,
            failed_at=failed_at,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output (config text omitted)."""
        return {
            "success": self.success,
            "state": self.state.value,
            "reset_required": self.reset_required,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
            "failed_at": self.failed_at.value if self.failed_at else None,
        }
