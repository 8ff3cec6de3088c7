"""Default transition sink: one JSON log line per event on ``tms.audit``.

An external audit logger can tail or ship these lines; persisting them is
outside this service.
"""

from __future__ import annotations

import logging

from tms.domain.events import TransferEventSink, TransferTransitionEvent
from tms.infrastructure.logging import log_json

audit_logger = logging.getLogger("tms.audit")


class LoggingEventSink(TransferEventSink):

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    def publish(self, event: TransferTransitionEvent) -> None:
        log_json(self._logger, event.as_dict())
