"""
Thread-safe rate-limited logging utilities.

A store that keeps failing would otherwise log the same error for every
invocation; this module keeps each distinct message to one line per interval.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# Seen-message cache: at most 100 distinct messages, forgotten after the interval
_DEFAULT_INTERVAL = 60
_error_log_cache = TTLCache(maxsize=100, ttl=_DEFAULT_INTERVAL)
_error_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message unless the same message was logged within the interval.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)

    key = f"{level}:{message}"
    with _error_log_cache_lock:
        if key in _error_log_cache:
            return False
        log_method(message)
        _error_log_cache[key] = True
        return True


def reset_rate_limits() -> None:
    """Forget all previously logged messages (for testing)"""
    with _error_log_cache_lock:
        _error_log_cache.clear()
