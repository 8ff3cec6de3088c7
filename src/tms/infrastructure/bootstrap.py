"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from tms.infrastructure.audit.logging_event_sink import LoggingEventSink
from tms.infrastructure.config import Settings
from tms.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings()


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(settings().DATA_FILE)


def event_sink() -> LoggingEventSink:
    return LoggingEventSink()
