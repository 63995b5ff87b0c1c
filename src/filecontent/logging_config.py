import logging
import os
import re
import sys
from typing import Optional

LOGGER_NAME = "filecontent"


class SensitiveDataFilter(logging.Filter):
    """Mask bearer tokens and similar credentials in log records."""

    PATTERNS = [
        (re.compile(r'(bearer\s+)([^\s,}\'"]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([^"\'}\s,]+)', re.IGNORECASE), r'\1***MASKED***'),
        (re.compile(r'(authorization["\']?\s*[:=]\s*["\']?)(?!bearer\b)([^"\'}\s,]+)', re.IGNORECASE),
         r'\1***MASKED***'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask_value(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._mask_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._mask_value(arg) for arg in record.args)
        return True

    def _mask_value(self, value):
        if isinstance(value, str):
            for pattern, replacement in self.PATTERNS:
                value = pattern.sub(replacement, value)
        return value


def setup_logging(log_level: Optional[str] = None, stream=None) -> logging.Logger:
    """
    Configure the package logger for command-line use.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to the FILECONTENT_LOG_LEVEL
            environment variable, then WARNING
        stream: Destination stream, stderr by default

    Returns:
        The configured package logger
    """
    if log_level is None:
        log_level = os.getenv("FILECONTENT_LOG_LEVEL", "WARNING")
    level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    handler.addFilter(SensitiveDataFilter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
