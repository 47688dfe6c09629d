"""Retry decorator used for optimistic-concurrency writes.

``max_attempts`` and ``delay`` accept either a number or a zero-argument callable. The
callable form is resolved on every call, so values read from Django settings follow
``override_settings`` in tests and runtime configuration changes.
"""

from __future__ import annotations

import functools
import logging
import secrets
import time
from typing import Any, Callable, Optional, Tuple, Type, Union

Number = Union[int, float]


def _resolve(value: Union[Number, Callable[[], Number]]) -> Number:
    return value() if callable(value) else value


def retry(
    max_attempts: Union[int, Callable[[], int]] = 3,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    delay: Union[float, Callable[[], float]] = 1.0,
    backoff: float = 2.0,
    max_delay: Optional[float] = None,
    jitter: float = 0.0,
    logger: Optional[logging.Logger] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Return a decorator that calls the wrapped function again when it raises ``exceptions``.

    Args:
        max_attempts: Number of attempts including the first call, or a callable returning it.
        exceptions: Exception types that trigger another attempt. Anything else propagates at once.
        delay: Initial sleep in seconds between attempts, or a callable returning it.
        backoff: Multiplier applied to the delay after each failed attempt.
        max_delay: Optional cap for the delay.
        jitter: Optional random extra sleep (seconds) added to each wait.
        logger: Logger receiving one warning per failed attempt.

    The last exception is re-raised once attempts are exhausted.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def _wrapped(*args: Any, **kwargs: Any) -> Any:
            attempts = int(_resolve(max_attempts))
            if attempts < 1:
                raise ValueError("max_attempts must be >= 1")
            cur_delay = float(_resolve(delay))

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as exc:
                    if logger:
                        logger.warning(
                            "Retrying %s (attempt %d/%d) after exception: %s",
                            getattr(func, "__name__", str(func)),
                            attempt,
                            attempts,
                            exc,
                        )
                    if attempt >= attempts:
                        raise

                    sleep_for = cur_delay
                    if jitter > 0.0:
                        sleep_for += secrets.randbelow(int(jitter * 1000) + 1) / 1000.0
                    if sleep_for > 0:
                        time.sleep(sleep_for)

                    cur_delay *= float(backoff)
                    if max_delay is not None:
                        cur_delay = min(cur_delay, float(max_delay))

        return _wrapped

    return _decorator
