# application/services/outbox_drainer.py
from __future__ import annotations

from dataclasses import dataclass

from application.exceptions import SubmissionError
from application.ports.logger import LoggerPort
from application.ports.submission_outbox import SubmissionOutboxPort
from application.services.submission_service import SubmissionClient


@dataclass(frozen=True)
class DrainResult:
    delivered: int = 0
    remaining: int = 0


class OutboxDrainer:
    def __init__(self, client: SubmissionClient, outbox: SubmissionOutboxPort, logger: LoggerPort):
        self._client = client
        self._outbox = outbox
        self._logger = logger

    def drain(self) -> DrainResult:
        delivered = 0
        remaining = 0
        for submission in self._outbox.pending():
            logger = self._logger.bind(submission_id=submission.submission_id)
            try:
                status = self._client.post(submission)
            except SubmissionError as e:
                remaining += 1
                logger.error("outbox.redeliver_failed", error=str(e), status=e.status)
                continue
            self._outbox.acknowledge(submission.submission_id)
            delivered += 1
            logger.info("outbox.redelivered", status=status)

        self._logger.info("outbox.drained", delivered=delivered, remaining=remaining)
        return DrainResult(delivered=delivered, remaining=remaining)
