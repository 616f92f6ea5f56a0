"""
entitygen - Centralized Logging Configuration
Human-readable console output through rich, JSON structured logs on request
"""

import logging
import os
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from rich.console import Console
from rich.logging import RichHandler


# Context variable for run tracing
run_id_var: ContextVar[str] = ContextVar('run_id', default='')

_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName', 'run_id',
}


def get_run_id() -> str:
    """Get current pipeline run ID from context"""
    return run_id_var.get() or ''


def set_run_id(run_id: str) -> None:
    """Set pipeline run ID in context"""
    run_id_var.set(run_id)


def generate_run_id() -> str:
    """Generate a unique run ID"""
    return str(uuid.uuid4())[:8]


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging
    One object per line, suitable for CI log collectors
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        run_id = get_run_id()
        if run_id:
            log_data["run_id"] = run_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        # Extra fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Formatter that includes the run ID, used for log files
    """

    def format(self, record: logging.LogRecord) -> str:
        record.run_id = get_run_id() or '-'
        return super().format(record)


class EntityGenLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_phase(self, phase: str, event: str, **kwargs) -> None:
        """Log pipeline phase transitions"""
        self.debug(
            f"Phase {phase}: {event}",
            extra={
                "event_type": "phase",
                "phase": phase,
                "phase_event": event,
                **kwargs
            }
        )

    def log_mutation(self, path: str, needle: str, status: str, **kwargs) -> None:
        """Log needle insertion outcomes"""
        self.debug(
            f"Needle {needle} in {path}: {status}",
            extra={
                "event_type": "mutation",
                "file_path": path,
                "needle": needle,
                "mutation_status": status,
                **kwargs
            }
        )

    def log_generation(self, kind: str, target: str, **kwargs) -> None:
        """Log sub-generator invocations"""
        self.debug(
            f"Invoking {kind} sub-generator for {target}",
            extra={
                "event_type": "generation",
                "generation_kind": kind,
                "generation_target": target,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


def setup_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> EntityGenLogger:
    """Setup logging configuration, falling back to ENTITYGEN_* environment variables"""
    level = level or os.environ.get("ENTITYGEN_LOG_LEVEL", "INFO")
    if json_logs is None:
        json_logs = os.environ.get("ENTITYGEN_JSON_LOGS", "").lower() == "true"
    log_file = log_file or os.environ.get("ENTITYGEN_LOG_FILE")

    # Register custom logger class
    logging.setLoggerClass(EntityGenLogger)

    logger = logging.getLogger("entitygen")
    logger.__class__ = EntityGenLogger  # Ensure it's our custom class
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    if json_logs:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(logger.level)
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=10485760,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        if json_logs:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(ContextualFormatter(
                "%(asctime)s | %(levelname)-8s | [%(run_id)s] | "
                "%(funcName)s:%(lineno)d | %(message)s"
            ))
        logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logger


# Create logger instance
logger: EntityGenLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_run_id',
    'set_run_id',
    'generate_run_id',
    'EntityGenLogger',
    'JSONFormatter',
    'ContextualFormatter',
]
