# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction applied to every log record before any sink sees it."""

from __future__ import annotations

import re
from typing import Any

_MASK = "***REDACTED***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Signing secrets: JWT_SECRET=..., secret_key: ...
    (re.compile(r"((?:jwt[_-]?)?secret(?:[_-]?key)?\s*[:=]\s*['\"]?)[^\s'\"]{8,}", re.I),
     rf"\1{_MASK}"),
    # Credentials in transit
    (re.compile(r"(authorization\s*:\s*['\"]?)[^'\"\n]{10,}", re.I), rf"\1{_MASK}"),
    (re.compile(r"(bearer\s+)[\w\-.]{20,}", re.I), rf"\1{_MASK}"),
    (re.compile(r"\beyJ[\w\-]+\.[\w\-]+\.[\w\-]*"), "***JWT***"),
    (re.compile(r"((?:password|passwd|pwd)\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.I), rf"\1{_MASK}"),
    # Stored Argon2 hashes: keep the algorithm, drop parameters, salt and digest
    (re.compile(r"\$(argon2(?:id|i|d))\$[^\s'\"]+"), rf"$\1${_MASK}"),
    # user:password@ in database URLs
    (re.compile(r"(\w[\w+]*://[^:/\s]+:)[^@\s]+@"), rf"\1{_MASK}@"),
    # E-mail local parts
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,})"), r"***@\1"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """loguru ``filter`` hook: rewrites the message in place and keeps the record."""
    record["message"] = sanitize_message(record["message"])
    return True
