# backend/core/naming.py
from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Optional

AUDIO_PREFIX = "audio/"


def now_millis() -> int:
    return int(time.time() * 1000)


def iso_timestamp(dt: Optional[datetime] = None) -> str:
    """
    UTC timestamp with millisecond precision and a trailing Z.

    Example: 2024-05-01T12:30:45.123Z
    """
    dt = (dt or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def plain_key(filename: str, millis: Optional[int] = None) -> str:
    """
    Key for a plain asset: "{millis}-{filename}" at the bucket root.

    The filename is used as-is (no sanitization).
    """
    ms = now_millis() if millis is None else millis
    return f"{ms}-{filename}"


def extension_of(name: str) -> str:
    """
    Text after the last "." in name.

    A name without any dot yields the whole name (e.g. "README" -> "README").
    """
    return name.rsplit(".", 1)[-1]


def audio_identifier(filename: str, millis: Optional[int] = None) -> str:
    ms = now_millis() if millis is None else millis
    return f"{ms}-{uuid.uuid4()}.{extension_of(filename)}"


def audio_key(identifier: str) -> str:
    return f"{AUDIO_PREFIX}{identifier}"


def trailing_segment(key: str) -> str:
    return key.rsplit("/", 1)[-1]
