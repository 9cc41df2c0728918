# domain/ids.py
import re
import uuid
from dataclasses import dataclass

from domain.exceptions import ValidationError

_SUBMISSION_ID_RE = re.compile(r"^[0-9a-f]{32}$")


@dataclass(frozen=True)
class SubmissionId:
    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValidationError("Submission id must not be empty")
        if not _SUBMISSION_ID_RE.match(self.value):
            raise ValidationError(f"Submission id is malformed: {self.value}")

    @classmethod
    def new(cls) -> "SubmissionId":
        return cls(uuid.uuid4().hex)
