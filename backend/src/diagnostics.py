"""Diagnostics: structured logging, console logging, faulthandler.

Layers:
1. Structured JSON logging with RotatingFileHandler (~/.rcas/logs)
2. Plain stderr logging for the command line
3. faulthandler: C-level crash tracebacks (SIGSEGV, SIGABRT)
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = "~/.rcas"
LOG_FILENAME = "rcas.log"
MAX_LOG_AGE_DAYS = 7


def _validate_log_dir(env_dir: str) -> str:
    """Keep RCAS_LOG_DIR under ~/.rcas. Returns a safe path."""
    default = os.path.expanduser(f"{APP_DIR}/logs")
    if env_dir:
        resolved = os.path.realpath(env_dir)
        allowed = os.path.realpath(os.path.expanduser(APP_DIR))
        if not resolved.startswith(allowed + os.sep) and resolved != allowed:
            logger.warning("RCAS_LOG_DIR outside allowed prefix, using default")
            return default
        return resolved
    return default


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry)


def _cleanup_old_logs(log_dir: str):
    cutoff = datetime.datetime.now() - datetime.timedelta(days=MAX_LOG_AGE_DAYS)
    try:
        for f in Path(log_dir).glob(f"{LOG_FILENAME}*"):
            if f.stat().st_mtime < cutoff.timestamp():
                f.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Log cleanup skipped: %s", e)


def _level_from_env(default: str = "INFO") -> int:
    name = os.environ.get("RCAS_LOG_LEVEL", default).upper()
    return getattr(logging, name, logging.INFO)


def setup_structured_logging(log_dir: str | None = None) -> str:
    """Attach a rotating JSON file handler to the root logger.

    Returns the directory that was used.
    """
    resolved_dir = _validate_log_dir(log_dir or os.environ.get("RCAS_LOG_DIR", ""))
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        os.path.join(resolved_dir, LOG_FILENAME),
        maxBytes=10_000_000,
        backupCount=7,
    )
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(_level_from_env())
    root.addHandler(handler)

    _cleanup_old_logs(resolved_dir)
    return resolved_dir


def setup_console_logging(verbose: bool = False) -> logging.Handler:
    """Plain stderr logging for interactive use."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    root = logging.getLogger()
    if verbose:
        root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    return handler


def setup_faulthandler(log_dir: str):
    """Enable faulthandler in a file separate from the rotating log."""
    fault_path = os.path.join(log_dir, "rcas_fault.log")
    try:
        fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
        os.chmod(fault_path, 0o600)
        faulthandler.enable(file=fault_file, all_threads=True)
    except OSError as e:
        logger.warning("Could not enable faulthandler: %s", e)


def init_diagnostics(verbose: bool = False):
    """Initialize all diagnostic layers. Call from main.py."""
    setup_console_logging(verbose)
    try:
        log_dir = setup_structured_logging()
    except OSError as e:
        logger.warning("File logging disabled: %s", e)
        return
    setup_faulthandler(log_dir)
    logger.debug("Diagnostics initialized: logging=%s, faulthandler=enabled", log_dir)
