# application/services/submission_mapper.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from domain.answers import AccumulatedRecord, as_token_list, as_token_set
from domain.exceptions import WizardDefinitionError
from domain.ids import SubmissionId
from domain.submission import FinalSubmission, OutputField, SubmissionMapping


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionMapper:
    """
    Turn the accumulated record into the case-management API document.

    Every output field comes from a row of the mapping table, so rules such as
    "help_with_accessing_medicine is always false" are explicit table entries.
    """

    def __init__(self, mapping: SubmissionMapping, clock: Optional[Callable[[], datetime]] = None):
        self._mapping = mapping
        self._clock = clock or _utc_now
        self._derivations: Dict[str, Callable[[OutputField, AccumulatedRecord], Any]] = {
            "text": self._derive_text,
            "flag": self._derive_flag,
            "contains": self._derive_contains,
            "joined": self._derive_joined,
            "constant": lambda f, _r: f.value,
            "timestamp": lambda _f, _r: self._clock().isoformat(),
        }

    def to_final_submission(self, record: AccumulatedRecord) -> FinalSubmission:
        on_behalf = self.is_on_behalf(record)
        payload: Dict[str, Any] = {}
        for out in self._mapping.fields:
            payload[out.name] = self.derive(out, record, on_behalf)

        return FinalSubmission(
            submission_id=SubmissionId.new().value,
            payload=payload,
            notify_email=self.notify_email(record),
            first_name=self._text(record.get(self._mapping.first_name)),
        )

    def derive(self, out: OutputField, record: AccumulatedRecord, on_behalf: bool) -> Any:
        fn = self._derivations.get(out.derive)
        if fn is None:
            raise WizardDefinitionError(f"Unknown derivation: {out.derive} ({out.name})")
        value = fn(out, record)
        if out.on_behalf_only and not on_behalf:
            return "" if isinstance(value, str) else False
        return value

    def is_on_behalf(self, record: AccumulatedRecord) -> bool:
        return bool(record.get(self._mapping.on_behalf_flag))

    def notify_email(self, record: AccumulatedRecord) -> str:
        if self.is_on_behalf(record):
            on_behalf_email = self._text(record.get(self._mapping.on_behalf_email)).strip()
            if on_behalf_email:
                return on_behalf_email
        return self._text(record.get(self._mapping.self_email)).strip()

    def _derive_text(self, out: OutputField, record: AccumulatedRecord) -> str:
        for source in out.sources:
            value = self._text(record.get(source))
            if value:
                return value
        return ""

    def _derive_flag(self, out: OutputField, record: AccumulatedRecord) -> bool:
        return bool(record.get(self._source(out)))

    def _derive_contains(self, out: OutputField, record: AccumulatedRecord) -> bool:
        return out.token in as_token_set(record.get(self._source(out)))

    def _derive_joined(self, out: OutputField, record: AccumulatedRecord) -> str:
        return self._mapping.list_separator.join(as_token_list(record.get(self._source(out))))

    def _source(self, out: OutputField) -> str:
        if not out.sources:
            raise WizardDefinitionError(f"Output field has no source: {out.name}")
        return out.sources[0]

    def _text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            return self._mapping.list_separator.join(as_token_list(value))
        return str(value)
