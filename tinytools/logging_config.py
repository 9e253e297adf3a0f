"""Logging configuration for TinyTools."""

import logging
import os
import sys
from pathlib import Path

LOG_FILE_NAME = "tinytools.log"


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration."""
    # Create logs directory if it doesn't exist
    log_dir = Path(os.getenv("TINYTOOLS_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Already configured (e.g. uvicorn reload or repeated CLI invocations in one process)
    if any(getattr(handler, "_tinytools", False) for handler in root_logger.handlers):
        return

    # File handler for all logs
    file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    file_handler._tinytools = True
    root_logger.addHandler(file_handler)

    # Stream handler for INFO and above
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(logging.INFO)
    stream_handler._tinytools = True
    root_logger.addHandler(stream_handler)

    # Access logs are noisy for a static host
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
