"""Turning user-supplied filenames into safe storage names."""
import re
import threading
import time
from typing import Callable, Optional

from media_repo.errors import ConfigurationError

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9._-]")

FALLBACK_NAME = "file"

_stamp_lock = threading.Lock()
_last_stamp = 0


def sanitize_filename(name: Optional[str]) -> str:
    """
    Collapse whitespace runs to `_`, then drop everything outside `[A-Za-z0-9._-]`.

    No length cap is applied.
    """
    collapsed = _WHITESPACE_RUN.sub("_", name or "")
    return _DISALLOWED_CHARS.sub("", collapsed)


def _now_ms() -> int:
    return int(time.time() * 1000)


def unique_timestamp_ms(clock: Optional[Callable[[], int]] = None) -> int:
    """Millisecond timestamp that never repeats within this process."""
    global _last_stamp
    stamp = (clock or _now_ms)()
    with _stamp_lock:
        if stamp <= _last_stamp:
            stamp = _last_stamp + 1
        _last_stamp = stamp
    return stamp


def make_stored_name(
    original_name: Optional[str],
    strategy: str = "timestamp",
    clock: Optional[Callable[[], int]] = None,
) -> str:
    """
    Build the name a file is stored under.

    :param original_name: The filename the client sent.
    :param strategy: "timestamp" prefixes a unique millisecond stamp, "original"
        keeps the sanitized name and lets a later upload replace an earlier one.
    :param clock: Optional millisecond clock, for tests.
    """
    safe_name = sanitize_filename(original_name)
    if not safe_name.strip("."):
        safe_name = FALLBACK_NAME

    if strategy == "timestamp":
        return f"{unique_timestamp_ms(clock)}-{safe_name}"
    if strategy == "original":
        return safe_name
    raise ConfigurationError(f"Unknown filename strategy: {strategy}")
