"""
Centralized logging configuration.

Responsibilities:
- Configure console and file logging
- Respect LOG_LEVEL and LOG_FILE_PATH from settings
- Prevent duplicate log handlers
- Carry per-request trace events through the parsing pipeline
"""

import logging
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.config import settings

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Should be called ONCE at app startup.
    """
    log_level = settings.LOG_LEVEL.upper()

    # Validate log level early
    if log_level not in VALID_LEVELS:
        raise ValueError(f"Invalid LOG_LEVEL: {settings.LOG_LEVEL}")

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Prevent duplicate handlers
    if root_logger.handlers:
        return

    # Log format ------------------------------------------------------------------
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stdout) ------------------------------------------------------------------
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (rotating) ------------------------------------------------------------------
    log_file_path = Path(settings.LOG_FILE_PATH)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        filename=log_file_path,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized successfully")


class RequestTrace(logging.LoggerAdapter):
    """
    Per-request diagnostic context.

    Every message is prefixed with the request id, and `event()` keeps an
    ordered record of what each pipeline stage did so a single request can be
    reconstructed without global state.
    """

    def __init__(self, logger: logging.Logger, request_id: Optional[str] = None):
        super().__init__(logger, {"request_id": request_id or uuid.uuid4().hex[:8]})
        self.events: List[Dict[str, Any]] = []

    @property
    def request_id(self) -> str:
        return self.extra["request_id"]

    def process(self, msg, kwargs):
        return f"[req={self.request_id}] {msg}", kwargs

    def event(self, stage: str, **fields: Any) -> None:
        self.events.append({"stage": stage, **fields})
        self.info("[%s] %s", stage, fields)
