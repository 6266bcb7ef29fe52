from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, log file rotation, and settings-derived configuration.
"""

import logging
import time
from pathlib import Path

import pytest

from cvfs.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach our handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """TC-01: Multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(_our_handlers())
    configure_logging(cfg)

    assert initial == 1
    assert len(_our_handlers()) == initial


def test_force_reconfigure_replaces_handlers() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    first_listener = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG"), force=True)
    root = logging.getLogger()

    assert len(_our_handlers()) == 1
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not first_listener
    assert root.level == logging.DEBUG


def test_foreign_handlers_survive() -> None:
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(level="INFO"))
        shutdown_logging()
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: File rotation when the size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Let the QueueListener drain
    time.sleep(0.5)

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_shutdown_flushes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "nested" / "cvfs.log"
    configure_logging(LoggingConfig(level="INFO", console=False, log_file=str(log_file)))
    logging.getLogger("cvfs.test").info("disk created")
    shutdown_logging()

    assert "disk created" in log_file.read_text(encoding="utf-8")
    assert not getattr(logging.getLogger(), _CONFIGURED_FLAG_ATTR, False)


def test_queue_listener_architecture() -> None:
    """TC-03: The root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    assert len(_our_handlers()) > 0
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_from_settings(isolated_data_dir: Path) -> None:
    settings = {"log_level": "ERROR", "log_to_file": False, "log_file": "x.log"}
    cfg = LoggingConfig.from_settings(settings)
    assert cfg.level == "ERROR"
    assert cfg.log_file is None

    cfg = LoggingConfig.from_settings(settings, debug=True)
    assert cfg.level == "DEBUG"

    default_path = get_default_log_path()
    cfg = LoggingConfig.from_settings(
        {"log_to_file": True, "log_file": ""}, default_log_file=default_path
    )
    assert cfg.log_file == default_path
    assert Path(default_path).parent == isolated_data_dir / "logs"
