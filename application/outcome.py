# application/outcome.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from domain.answers import AccumulatedRecord, SubmittedAnswers
from domain.submission import FinalSubmission


@dataclass(frozen=True)
class DeliveryReport:
    status: str               # "accepted" | "queued"
    email_sent: bool = False
    error_message: Optional[str] = None

    @property
    def queued(self) -> bool:
        return self.status == "queued"


@dataclass(frozen=True)
class Rejected:
    step_id: str
    errors: Dict[str, List[str]]
    answers: SubmittedAnswers
    form_error: Optional[str] = None


@dataclass(frozen=True)
class Continue:
    next_step: str
    record: AccumulatedRecord = field(default_factory=dict)


@dataclass(frozen=True)
class EarlyExit:
    reason_code: str
    record: AccumulatedRecord = field(default_factory=dict)


@dataclass(frozen=True)
class Completed:
    submission: FinalSubmission
    delivery: DeliveryReport


WizardOutcome = Union[Rejected, Continue, EarlyExit, Completed]
