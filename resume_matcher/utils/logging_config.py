"""
Logging setup for the Resume Match Engine.

Everything logs under the `resume_matcher` namespace; `configure_for_environment`
picks a profile from the ENVIRONMENT variable and applies it with dictConfig.
"""
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

NAMESPACE = "resume_matcher"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-36s | %(funcName)-20s:%(lineno)-4d | %(message)s",
    "json": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "line": %(lineno)d, "message": "%(message)s"}',
}

# third-party loggers that are chatty while documents are fetched and parsed
QUIET_LOGGERS = ("pdfminer", "urllib3", "docx")

# ENVIRONMENT -> (level, file logging, format); level None means LOG_LEVEL
PROFILES = {
    "production": (None, True, "detailed"),
    "development": ("DEBUG", False, "detailed"),
    "testing": ("WARNING", False, "simple"),
}


def build_config(level: str, log_file: Optional[Path], format_style: str, enable_console: bool = True) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {}
    if enable_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style,
            "stream": "ext://sys.stdout",
        }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(log_file),
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "encoding": "utf8",
        }

    loggers: Dict[str, Any] = {
        NAMESPACE: {"level": level, "handlers": list(handlers), "propagate": False},
        "uvicorn": {"level": "INFO", "handlers": list(handlers), "propagate": False},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "ERROR"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            style: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for style, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Apply the engine's logging configuration.

    Args:
        level: Level for the resume_matcher loggers
        log_file: Rotating log file path, defaults to $LOG_DIR/resume_matcher_<date>.log
        enable_console: Log to stdout
        enable_file: Log to the rotating file
        format_style: 'simple', 'detailed' or 'json'
    """
    if format_style not in FORMATS:
        format_style = "detailed"

    path = None
    if enable_file:
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        path = Path(log_file) if log_file else log_dir / f"resume_matcher_{datetime.now():%Y%m%d}.log"

    logging.config.dictConfig(build_config(level, path, format_style, enable_console))

    logger = get_logger("logging")
    logger.info(f"Logging configured - level={level} console={enable_console} file={path or 'off'}")


def get_logger(name: str) -> logging.Logger:
    """Logger under the resume_matcher namespace (module __name__ values pass through)."""
    if name == NAMESPACE or name.startswith(f"{NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{NAMESPACE}.{name}")


def configure_for_environment() -> None:
    environment = os.getenv("ENVIRONMENT", "development").lower()
    level, enable_file, format_style = PROFILES.get(environment, (None, False, "detailed"))
    setup_logging(
        level=level or os.getenv("LOG_LEVEL", "INFO").upper(),
        enable_file=enable_file,
        format_style=format_style,
    )


class PerformanceMonitor:
    """Times a block of work; logs at warning level when it runs past `threshold_ms`."""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = 0.0
        self._start = None

    def __enter__(self):
        self._start = time.perf_counter()
        self.logger.debug(f"Starting {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
