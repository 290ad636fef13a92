import secrets
import string
import threading
import time

_ID_CHARS = string.ascii_lowercase + string.digits

_lock = threading.Lock()
_last_millis = 0


def _next_millis() -> int:
    # strictly increasing, even for ids minted within the same millisecond
    global _last_millis
    with _lock:
        _last_millis = max(int(time.time() * 1000), _last_millis + 1)
        return _last_millis


def generate_record_id(prefix: str) -> str:
    """Millisecond timestamp plus a random suffix, so ids sort by creation time."""
    millis = _next_millis()
    suffix = "".join(secrets.choice(_ID_CHARS) for _ in range(9))
    return f"{prefix}{millis}{suffix}"
