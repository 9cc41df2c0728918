# application/services/answer_accumulator.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from domain.answers import AccumulatedRecord, SubmittedAnswers, as_token_list
from domain.steps.base import StepDefinition
from domain.steps.fields import FieldKind
from domain.wizard import WizardDefinition

# yes/no radios post "true" or "false"; only the exact "false" answer is a no
NO_ANSWER = "false"


def _to_text(value: Any) -> str:
    if isinstance(value, list):
        value = value[-1] if value else ""
    return "" if value is None else str(value)


def _to_yes_no(value: Any) -> bool:
    text = _to_text(value)
    return text != "" and text != NO_ANSWER


def _to_checkbox(value: Any) -> bool:
    # presence is what counts; an unticked checkbox is simply not posted
    if isinstance(value, list):
        return any(str(v).strip() for v in value)
    return value is not None and str(value).strip() != ""


_COERCE: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.TEXT: _to_text,
    FieldKind.CHOICE: _to_text,
    FieldKind.DATE_PART: _to_text,
    FieldKind.YES_NO: _to_yes_no,
    FieldKind.CHECKBOX: _to_checkbox,
    FieldKind.MULTI: as_token_list,
}

_ABSENT: Dict[FieldKind, Callable[[], Any]] = {
    FieldKind.TEXT: str,
    FieldKind.CHOICE: str,
    FieldKind.DATE_PART: str,
    FieldKind.YES_NO: lambda: False,
    FieldKind.CHECKBOX: lambda: False,
    FieldKind.MULTI: list,
}


class AnswerAccumulator:
    """
    Merge validated step answers into the record carried between steps.

    merge() only ever sets the fields the submitted step owns; fields from
    other steps are copied through untouched.
    """

    def __init__(self, wizard: WizardDefinition):
        self._wizard = wizard
        self._kinds = wizard.field_kinds()

    def merge(
        self,
        previous: AccumulatedRecord,
        step_id: str,
        validated_answers: SubmittedAnswers,
    ) -> AccumulatedRecord:
        step = self._wizard.get_step(step_id)
        return self.merge_step(previous, step, validated_answers)

    def merge_step(
        self,
        previous: AccumulatedRecord,
        step: StepDefinition,
        validated_answers: SubmittedAnswers,
    ) -> AccumulatedRecord:
        record: AccumulatedRecord = dict(previous or {})
        for spec in step.fields:
            if spec.name in validated_answers:
                record[spec.name] = _COERCE[spec.kind](validated_answers[spec.name])
            else:
                record[spec.name] = _ABSENT[spec.kind]()
        return record

    def decode(self, form: SubmittedAnswers, exclude: Optional[Iterable[str]] = None) -> AccumulatedRecord:
        """
        Rebuild the carried record from hidden form fields or a query string.
        Only fields the wizard declares are kept.
        """
        skip = set(exclude or [])
        record: AccumulatedRecord = {}
        for name, value in form.items():
            if name in skip:
                continue
            kind = self._kinds.get(name)
            if kind is None:
                continue
            record[name] = _COERCE[kind](value)
        return record

    def to_form(self, record: AccumulatedRecord) -> Dict[str, Union[str, List[str]]]:
        out: Dict[str, Union[str, List[str]]] = {}
        for name, value in record.items():
            kind = self._kinds.get(name, FieldKind.TEXT)
            if kind == FieldKind.CHECKBOX:
                if value:
                    out[name] = "on"
            elif kind == FieldKind.YES_NO:
                out[name] = "true" if value else "false"
            elif kind == FieldKind.MULTI:
                out[name] = as_token_list(value)
            else:
                out[name] = _to_text(value)
        return out
