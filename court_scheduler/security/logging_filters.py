"""Logging filters that scrub customer contact details."""

from __future__ import annotations

import logging
import re

_PHONE_PATTERN = re.compile(r"(?<!\d)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")


def redact_phone_numbers(text: str) -> str:
    return _PHONE_PATTERN.sub("**REDACTED**", text)


class SensitiveFilter(logging.Filter):
    """Replace phone numbers in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            message = record.getMessage() if record.args else record.msg
            record.msg = redact_phone_numbers(message)
            record.args = ()
        return True


__all__ = ["SensitiveFilter", "redact_phone_numbers"]
