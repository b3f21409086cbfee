"""Audit logging for reconciliation attempts.

Every configuration push produces one JSON line in a dedicated audit log:
when it happened, which device, whether the uplink was reset, and the error
if it failed. Operators read this alongside the persisted config file.
"""
import json
import logging
import os
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Dedicated audit logger
audit_logger = logging.getLogger("ap_agent.audit")

DEFAULT_AUDIT_DIR = "~/.ap-config-agent"


def setup_audit_logging(log_dir: Optional[str] = None) -> Path:
    """Configure audit logging to file.

    Args:
        log_dir: Directory for audit logs. Defaults to ~/.ap-config-agent/

    Returns:
        Path of the audit log file
    """
    log_dir = os.path.expanduser(log_dir or DEFAULT_AUDIT_DIR)
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    audit_file = Path(log_dir) / "audit.log"

    audit_logger.setLevel(logging.INFO)
    audit_logger.handlers.clear()

    handler = RotatingFileHandler(
        audit_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)
    audit_logger.propagate = False

    return audit_file


@dataclass
class ReconcileRecord:
    """Record of one reconciliation attempt."""
    timestamp: str
    hostname: str
    success: bool
    reset_required: bool = False
    state: str = ""
    error_kind: Optional[str] = None
    error: Optional[str] = None
    duration_ms: float = 0

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=None)

    @classmethod
    def from_json(cls, json_str: str) -> "ReconcileRecord":
        return cls(**json.loads(json_str))


def log_reconcile(
    hostname: str,
    success: bool,
    reset_required: bool = False,
    state: str = "",
    error_kind: Optional[str] = None,
    error: Optional[str] = None,
    duration_ms: float = 0,
) -> ReconcileRecord:
    """Write one reconciliation attempt to the audit log."""
    record = ReconcileRecord(
        timestamp=datetime.now(timezone.utc).isoformat(),
        hostname=hostname,
        success=success,
        reset_required=reset_required,
        state=state,
        error_kind=error_kind,
        error=error[:1000] if error else None,  # Truncate long errors
        duration_ms=round(duration_ms, 2),
    )
    audit_logger.info(record.to_json())
    return record


def get_recent_records(
    log_file: Optional[str] = None,
    limit: int = 100,
) -> list[ReconcileRecord]:
    """Read recent reconciliation records, most recent first."""
    if log_file is None:
        log_file = os.path.join(os.path.expanduser(DEFAULT_AUDIT_DIR), "audit.log")

    if not os.path.exists(log_file):
        return []

    records = []
    with open(log_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(ReconcileRecord.from_json(line))
            except (json.JSONDecodeError, TypeError):
                continue  # Skip malformed lines

    return list(reversed(records[-limit:]))
