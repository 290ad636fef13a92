import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


def run_best_effort(description: str, func: Callable[..., Any], *args, **kwargs) -> bool:
    """
    Run a side effect whose failure must not affect the caller.

    Failures are logged and discarded. Returns True when the call succeeded.
    """
    try:
        func(*args, **kwargs)
    except Exception:
        logger.warning("Best-effort %s failed", description, exc_info=True)
        return False
    return True
