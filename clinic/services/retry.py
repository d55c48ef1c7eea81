"""
Exponential backoff for calls to rate-limited upstream services.

Only rate-limit failures are retried: an exception whose ``response``
carries HTTP 429, or whose message mentions ``429`` or ``Rate limit``.
Anything else is raised on the first attempt.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from django.conf import settings
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

logger = logging.getLogger(__name__)


def is_rate_limit_error(exc: BaseException) -> bool:
    response = getattr(exc, 'response', None)
    if getattr(response, 'status_code', None) == 429:
        return True
    message = str(exc)
    return '429' in message or 'Rate limit' in message


def _log_retry(max_retries: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        logger.warning("Rate limited (attempt %d/%d), retrying in %.2fs: %s",
                       state.attempt_number, max_retries, state.next_action.sleep, state.outcome.exception())
    return before_sleep


def execute_with_retry(fn: Callable[[], Any], max_retries: Optional[int] = None, base_delay: Optional[float] = None,
                       *, sleep: Callable[[float], Any] = time.sleep) -> Any:
    """Call ``fn`` and retry rate-limit failures with exponential backoff.

    ``max_retries`` is the total number of attempts.  Before attempt
    ``n + 1`` the helper waits ``base_delay * 2**(n - 1)`` seconds plus up
    to one second of jitter.  The last rate-limit error is re-raised when
    attempts run out.
    """
    if not callable(fn):
        raise TypeError('execute_with_retry expects a callable')
    if max_retries is None:
        max_retries = getattr(settings, 'RETRY_MAX_ATTEMPTS', 3)
    if base_delay is None:
        base_delay = getattr(settings, 'RETRY_BASE_DELAY', 1.0)
    max_retries = max(int(max_retries), 1)

    retrying = Retrying(
        retry=retry_if_exception(is_rate_limit_error),
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay) + wait_random(0, 1),
        before_sleep=_log_retry(max_retries),
        sleep=sleep,
        reraise=True,
    )
    try:
        return retrying(fn)
    except Exception as exc:
        if is_rate_limit_error(exc):
            logger.error("Rate limited, giving up after %d attempts: %s", max_retries, exc)
        raise
