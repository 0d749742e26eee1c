"""
Logging Configuration — Structured logging setup.

Provides consistent logging across all modules with:
- Human-readable output for terminals
- JSON output (machine-readable)
- GitHub Actions workflow commands (::error::, ::warning::)
- Masking of registered secrets in every record

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: text, json, github (default: text)

## Usage

    from repo_mirror.logging_config import setup_logging, register_secret

    setup_logging()  # Call once at startup
    register_secret(token)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Set

MASK = "***"

_secrets: Set[str] = set()


def register_secret(value: str) -> None:
    """Mask value in every log record emitted from now on."""
    if value:
        _secrets.add(value)


def clear_secrets() -> None:
    _secrets.clear()


def _mask(text: str) -> str:
    # Longest first so a secret containing another is masked whole
    for secret in sorted(_secrets, key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


class SecretMaskingFilter(logging.Filter):
    """
    Replace registered secrets with *** in the rendered message and in
    any exception or stack text attached to the record.
    """

    _exc_formatter = logging.Formatter()

    def filter(self, record: logging.LogRecord) -> bool:
        if not _secrets:
            return True
        record.msg = _mask(record.getMessage())
        record.args = None
        # Formatters render exc_text when it is already set
        if record.exc_info and not record.exc_text:
            record.exc_text = self._exc_formatter.formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = _mask(record.exc_text)
        if record.stack_info:
            record.stack_info = _mask(record.stack_info)
        return True


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "step"):
            log_entry["step"] = record.step

        if record.exc_info:
            log_entry["exception"] = record.exc_text or self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """
    Human-readable log formatter.

    Output format:
    12:34:56 INFO  [module] Message
    """

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.now().strftime("%H:%M:%S")

        level = record.levelname
        if sys.stderr.isatty():
            color = self.COLORS.get(level, "")
            level = f"{color}{level:7}{self.RESET}"
        else:
            level = f"{level:7}"

        module = record.name.split(".")[-1][:15]
        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{record.exc_text or self.formatException(record.exc_info)}"

        return f"{time_str} {level} [{module:15}] {msg}"


class GitHubActionsFormatter(logging.Formatter):
    """
    Workflow-command formatter for GitHub Actions runners.

    ERROR becomes ::error::, WARNING ::warning::, DEBUG ::debug::.
    INFO lines are printed as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if record.levelno >= logging.ERROR:
            return f"::error::{self._escape(msg)}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{self._escape(msg)}"
        if record.levelno <= logging.DEBUG:
            return f"::debug::{self._escape(msg)}"
        return msg

    @staticmethod
    def _escape(msg: str) -> str:
        # Workflow commands are single-line
        return msg.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
               Defaults to LOG_LEVEL env var or INFO.
        format_type: Output format (text, json, github).
                     Defaults to LOG_FORMAT env var or text.
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()

    numeric_level = getattr(logging, log_level, logging.INFO)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    elif log_format == "github":
        formatter = GitHubActionsFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    handler.addFilter(SecretMaskingFilter())
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )
