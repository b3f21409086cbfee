"""Logging, audit and retry helpers."""
from .retry import with_retry, RETRYABLE_EXCEPTIONS
from .logging_config import (
    setup_logging,
    timed,
    timed_section,
    perf_logger,
)
from .audit_log import (
    ReconcileRecord,
    setup_audit_logging,
    log_reconcile,
    get_recent_records,
)

__all__ = [
    "with_retry",
    "RETRYABLE_EXCEPTIONS",
    "setup_logging",
    "timed",
    "timed_section",
    "perf_logger",
    "ReconcileRecord",
    "setup_audit_logging",
    "log_reconcile",
    "get_recent_records",
]
