# application/services/field_validator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from domain.answers import SubmittedAnswers
from domain.exceptions import WizardDefinitionError
from domain.steps.base import StepDefinition
from domain.steps.checks import CHECKS, PREPROCESSORS, is_blank
from domain.validation import ValidationResult
from domain.wizard import WizardDefinition


@dataclass(frozen=True)
class FieldValidator:
    """
    Apply a step's FieldRules to raw form input.

    Every rule is evaluated, so a field carries all of its violated messages.
    Pre-processing mutates the value seen by later rules and by the caller
    (ValidationResult.cleaned), the way form sanitizers do.
    """
    wizard: WizardDefinition

    def validate(self, step_id: str, raw_answers: SubmittedAnswers) -> ValidationResult:
        return self.validate_step(self.wizard.get_step(step_id), raw_answers)

    def validate_step(self, step: StepDefinition, raw_answers: SubmittedAnswers) -> ValidationResult:
        cleaned: Dict[str, Any] = {}
        for name in step.field_names:
            if name in raw_answers:
                cleaned[name] = raw_answers[name]

        errors: Dict[str, List[str]] = {}
        for rule in step.rules:
            value = cleaned.get(rule.field, raw_answers.get(rule.field))
            for name in rule.preprocess:
                fn = PREPROCESSORS.get(name)
                if fn is None:
                    raise WizardDefinitionError(f"Unknown preprocess: {name} ({step.id}.{rule.field})")
                value = fn(value)
            if rule.preprocess:
                cleaned[rule.field] = value

            if rule.only_if is not None:
                guard = cleaned.get(rule.only_if, raw_answers.get(rule.only_if))
                if is_blank(guard):
                    continue

            check = CHECKS.get(rule.check)
            if check is None:
                raise WizardDefinitionError(f"Unknown check: {rule.check} ({step.id}.{rule.field})")
            if not check(value):
                errors.setdefault(rule.field, []).append(rule.message)

        return ValidationResult(errors=errors, cleaned=cleaned)
