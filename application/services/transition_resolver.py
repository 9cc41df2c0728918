# application/services/transition_resolver.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.answers import AccumulatedRecord
from domain.steps.base import StepDefinition, TransitionRule
from domain.wizard import WizardDefinition


@dataclass(frozen=True)
class Transition:
    kind: str                         # "goto" | "exit" | "complete"
    step_id: Optional[str] = None
    reason_code: Optional[str] = None

    @classmethod
    def goto(cls, step_id: str) -> "Transition":
        return cls(kind="goto", step_id=step_id)

    @classmethod
    def exit(cls, reason_code: str) -> "Transition":
        return cls(kind="exit", reason_code=reason_code)

    @classmethod
    def complete(cls) -> "Transition":
        return cls(kind="complete")


class TransitionResolver:
    """
    Evaluate a step's decision table against the accumulated record.
    Rules run in table order; the first match wins and the trailing
    fallback always matches.
    """

    def __init__(self, wizard: WizardDefinition):
        self._wizard = wizard

    def next_step(self, step_id: str, accumulated: AccumulatedRecord) -> Transition:
        return self.resolve(self._wizard.get_step(step_id), accumulated)

    def resolve(self, step: StepDefinition, accumulated: AccumulatedRecord) -> Transition:
        for rule in step.transitions:
            if rule.matches(accumulated):
                return self._rule_to_transition(rule)
        # unreachable for a loaded wizard: the definition guarantees a fallback
        raise RuntimeError(f"No transition matched: {step.id}")

    def _rule_to_transition(self, rule: TransitionRule) -> Transition:
        if rule.complete:
            return Transition.complete()
        if rule.exit_reason is not None:
            return Transition.exit(rule.exit_reason)
        return Transition.goto(rule.goto_step_id or "")
