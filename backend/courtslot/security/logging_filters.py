"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|X-Lifecycle-Secret:\s*\S+|lifecycle_trigger_secret\"?\s*[:=]\s*\"?[^\"\s,]+\"?|postgresql(?:\+\w+)?://[^@\s]+@)",
    re.IGNORECASE,
)


class SensitiveFilter(logging.Filter):
    """Replace secrets and database credentials in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _SENSITIVE_PATTERN.sub("**REDACTED**", record.msg)
        return True


__all__ = ["SensitiveFilter"]
