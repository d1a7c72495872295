"""Logging configuration for franzpy.

Command output goes to stdout; logs go to stderr (and optionally a file) so
that piping a command's output never mixes in diagnostic lines.
"""

import json
import logging
import sys
import time
from typing import Any, Optional


_STANDARD_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'message', 'exc_info', 'exc_text',
    'stack_info',
])


class StructuredFormatter(logging.Formatter):
    """Structured formatter producing either a readable line or JSON."""

    def __init__(self, json_format: bool = False):
        super().__init__()
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        log_data: dict[str, Any] = {
            'timestamp': time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(record.created)),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Attributes passed through ``extra=``
        custom_attrs = {
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if custom_attrs:
            log_data['context'] = custom_attrs

        if self.json_format:
            return json.dumps(log_data, default=str)

        msg = f"{log_data['timestamp']} - {log_data['level']} - {log_data['logger']} - {log_data['message']}"
        if 'context' in log_data:
            context_str = ', '.join(f"{k}={v}" for k, v in log_data['context'].items())
            msg += f" [{context_str}]"
        if 'exception' in log_data:
            msg += f"\n{log_data['exception']}"
        return msg


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: Optional[str] = None
) -> None:
    """Configure logging for franzpy.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        json_format: Whether to use JSON format for logs
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = StructuredFormatter(json_format=json_format)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)  # Always debug level for files
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        handlers=handlers,
        force=True  # Override existing configuration
    )

    logging.getLogger('franzpy').setLevel(logging.DEBUG if log_file else numeric_level)
