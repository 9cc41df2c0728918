# domain/exceptions.py
from __future__ import annotations


class ValidationError(Exception):
    pass


class WizardDefinitionError(Exception):
    pass


class UnknownStepError(KeyError):
    def __init__(self, step_id: str) -> None:
        super().__init__(step_id)
        self.step_id = step_id

    def __str__(self) -> str:
        return f"Unknown step: {self.step_id}"
