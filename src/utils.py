"""Utilities for hashing and audit metadata."""

import hashlib
import time
from datetime import datetime, timezone


def hash_bytes(data: bytes) -> str:
    """Compute SHA256 hash of raw bytes. Deterministic."""
    return hashlib.sha256(data).hexdigest()


def hash_text(text: str) -> str:
    """Compute SHA256 hash of text. Deterministic."""
    return hash_bytes(text.encode("utf-8"))


def iso_now() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def timestamp_ms() -> int:
    """Milliseconds since the epoch, used in generated file names."""
    return int(time.time() * 1000)
