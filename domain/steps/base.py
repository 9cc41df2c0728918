# domain/steps/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from domain.answers import as_token_set
from domain.steps.fields import FieldRule, FieldSpec


@dataclass(frozen=True)
class Condition:
    field: str
    op: str                   # "equals" | "not_equals" | "contains"
    value: Any

    def evaluate(self, record: Dict[str, Any]) -> bool:
        actual = record.get(self.field)
        if self.op == "equals":
            return actual == self.value
        if self.op == "not_equals":
            return actual != self.value
        if self.op == "contains":
            return str(self.value) in as_token_set(actual)
        return False


@dataclass(frozen=True)
class TransitionRule:
    when: Optional[Condition]  # None => fallback
    goto_step_id: Optional[str] = None
    exit_reason: Optional[str] = None
    complete: bool = False

    def matches(self, record: Dict[str, Any]) -> bool:
        return self.when is None or self.when.evaluate(record)


@dataclass(frozen=True)
class StepDefinition:
    id: str
    template: str
    fields: List[FieldSpec] = field(default_factory=list)
    rules: List[FieldRule] = field(default_factory=list)
    transitions: List[TransitionRule] = field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def rules_for(self, field_name: str) -> List[FieldRule]:
        return [r for r in self.rules if r.field == field_name]
