# application/ports/submission_outbox.py
from __future__ import annotations

from typing import List, Protocol

from domain.submission import FinalSubmission


class SubmissionOutboxPort(Protocol):
    def enqueue(self, submission: FinalSubmission, reason: str) -> None:
        ...

    def pending(self) -> List[FinalSubmission]:
        ...

    def acknowledge(self, submission_id: str) -> None:
        ...
