"""Caller-side retry for optimistic-concurrency conflicts.

Handlers never retry on their own.  A caller that wants the documented
"retry once" behaviour wraps the call::

    run_with_retry(lambda: handler.handle(transfer_id, ...))

Only ConcurrencyConflictError is retried; every other error propagates on
the first attempt.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from tms.domain.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(operation: Callable[[], T], attempts: int = 2) -> T:
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConcurrencyConflictError:
            if attempt == attempts:
                raise
            logger.warning("Concurrency conflict, retrying (attempt %d of %d)", attempt + 1, attempts)
    raise AssertionError("unreachable")
