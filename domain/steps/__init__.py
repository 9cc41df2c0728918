from domain.steps.base import Condition, StepDefinition, TransitionRule
from domain.steps.fields import FieldKind, FieldRule, FieldSpec

__all__ = [
    "Condition",
    "StepDefinition",
    "TransitionRule",
    "FieldKind",
    "FieldRule",
    "FieldSpec",
]
