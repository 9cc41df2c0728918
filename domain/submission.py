# domain/submission.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class OutputField:
    """
    One row of the submission mapping table.

    derive:
      text      first non-empty of sources, else ""
      flag      bool of the first source
      contains  token in the first source (multi-select)
      joined    first source list joined by the table separator
      constant  value as given
      timestamp server clock, ISO-8601
    """
    name: str
    derive: str = "text"
    sources: List[str] = field(default_factory=list)
    token: str = ""
    value: Any = None
    on_behalf_only: bool = False


@dataclass(frozen=True)
class SubmissionMapping:
    fields: List[OutputField] = field(default_factory=list)
    on_behalf_flag: str = "is_on_behalf"
    on_behalf_email: str = "on_behalf_email_address"
    self_email: str = "email"
    first_name: str = "first_name"
    list_separator: str = ", "


@dataclass(frozen=True)
class FinalSubmission:
    submission_id: str
    payload: Dict[str, Any]
    notify_email: str = ""
    first_name: str = ""

    def to_json(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "submission_id": self.submission_id,
            "payload": self.payload,
            "notify_email": self.notify_email,
            "first_name": self.first_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinalSubmission":
        return cls(
            submission_id=data["submission_id"],
            payload=dict(data.get("payload") or {}),
            notify_email=data.get("notify_email", ""),
            first_name=data.get("first_name", ""),
        )
