"""Logging configuration for the AP config agent.

Provides:
- Console output for real-time debugging
- File-based logging with rotation
- Timing helpers for reconciliation steps

Environment Variables:
    AP_AGENT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    AP_AGENT_LOG_FILE: Path to log file (default: ~/.ap-config-agent/agent.log)
    AP_AGENT_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    AP_AGENT_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from ap_config_agent.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("query_vlans")
    def query_vlans(self, intf_name):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("ap_agent.perf")
main_logger = logging.getLogger("ap_config_agent")

_configured = False


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("AP_AGENT_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".ap-config-agent" / "agent.log"
    path_str = os.environ.get("AP_AGENT_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(log_file: Optional[Path] = None) -> None:
    """Configure logging for the agent. Safe to call more than once.

    Sets up:
    - Console handler (respects AP_AGENT_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for step timings
    """
    global _configured
    if _configured:
        return

    log_level = get_log_level()
    log_file = log_file or get_log_file()
    max_size_mb = int(os.environ.get("AP_AGENT_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("AP_AGENT_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    main_logger.addHandler(console_handler)
    main_logger.addHandler(file_handler)

    perf_logger.setLevel(logging.DEBUG)
    perf_logger.addHandler(file_handler)
    perf_logger.propagate = False

    _configured = True
    main_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")


def timed(operation: str) -> Callable:
    """Decorator to log the execution time of a function.

    Args:
        operation: Name of the operation (e.g., "query_vlans", "apply")
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}")
                raise
            elapsed = (time.perf_counter() - start) * 1000
            perf_logger.info(f"{operation:20s} | {elapsed:8.2f}ms | OK")
            return result

        return wrapper

    return decorator


@contextmanager
def timed_section(operation: str, **extra):
    """Context manager for timing code sections.

    Usage:
        with timed_section("reconcile", hostname="ap-1"):
            ...
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.warning(msg)
        raise

    elapsed = (time.perf_counter() - start) * 1000
    msg = f"{operation:20s} | {elapsed:8.2f}ms | OK"
    if extra_str:
        msg += f" | {extra_str}"
    perf_logger.info(msg)
