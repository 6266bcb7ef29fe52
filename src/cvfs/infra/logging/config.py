from __future__ import annotations

"""
Logging Configuration Models.

Immutable description of how the logging subsystem should be wired for a
CVFS run, plus the mapping from the user-facing level names found in the
application configuration to native logging constants.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup for one process.

    The interactive shell writes its own output to stdout, so diagnostics go
    to stderr and, optionally, to a rotating file.

    Attributes:
        level: Minimum severity captured.
        console: Emit records on stderr.
        log_file: Path of the rotating log file, or None to disable it.
        max_bytes: Rotation threshold for the log file.
        backup_count: Rotated segments kept.
        console_fmt: Format used on stderr.
        file_fmt: Format used in the log file.
        datefmt: Timestamp format for the log file.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "%(levelname)s | %(name)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_settings(
            cls,
            settings: Mapping[str, Any],
            *,
            debug: bool = False,
            default_log_file: Optional[str] = None,
    ) -> LoggingConfig:
        """
        Derive a logging setup from the validated application configuration.

        Args:
            settings: Application configuration ('log_level', 'log_to_file',
                'log_file' are consulted).
            debug: Force DEBUG level regardless of the configured level.
            default_log_file: Path used when file logging is on but no
                explicit 'log_file' is configured.
        """
        level = "DEBUG" if debug else str(settings.get("log_level") or "WARNING")
        log_file: Optional[str] = None
        if settings.get("log_to_file"):
            log_file = settings.get("log_file") or default_log_file
        return cls(level=level, console=True, log_file=log_file)
