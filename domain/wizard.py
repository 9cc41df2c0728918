# domain/wizard.py
"""
Wizard domain model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from domain.exceptions import UnknownStepError, WizardDefinitionError
from domain.steps.base import StepDefinition
from domain.steps.fields import FieldKind
from domain.submission import SubmissionMapping


@dataclass(frozen=True)
class WizardMeta:
    id: str
    name: str
    version: int = 1
    description: str = ""


@dataclass(frozen=True)
class WizardDefinition:
    """
    Wizard aggregate root: the step table plus the submission mapping table.
    """
    meta: WizardMeta
    steps: List[StepDefinition]
    submission: SubmissionMapping = field(default_factory=SubmissionMapping)

    def __post_init__(self) -> None:
        self._check_graph()

    @property
    def first_step(self) -> StepDefinition:
        return self.steps[0]

    def get_step(self, step_id: str) -> StepDefinition:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise UnknownStepError(step_id)

    def has_step(self, step_id: str) -> bool:
        return any(s.id == step_id for s in self.steps)

    def find_by_template(self, template: str) -> StepDefinition | None:
        for step in self.steps:
            if step.template == template:
                return step
        return None

    def field_kinds(self) -> Dict[str, FieldKind]:
        kinds: Dict[str, FieldKind] = {}
        for step in self.steps:
            for spec in step.fields:
                kinds.setdefault(spec.name, spec.kind)
        return kinds

    def _check_graph(self) -> None:
        if not self.steps:
            raise WizardDefinitionError(f"Wizard has no steps: {self.meta.id}")

        ids = [s.id for s in self.steps]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise WizardDefinitionError(f"Duplicate step ids: {', '.join(duplicates)}")

        edges: Dict[str, List[str]] = {}
        for step in self.steps:
            undeclared = sorted({r.field for r in step.rules} - set(step.field_names))
            if undeclared:
                raise WizardDefinitionError(
                    f"Rules target undeclared fields: {step.id} ({', '.join(undeclared)})"
                )
            if not step.transitions or step.transitions[-1].when is not None:
                raise WizardDefinitionError(f"Step has no fallback transition: {step.id}")
            for rule in step.transitions[:-1]:
                if rule.when is None:
                    raise WizardDefinitionError(f"Fallback transition must be last: {step.id}")
            targets = []
            for rule in step.transitions:
                if rule.goto_step_id is None:
                    continue
                if rule.goto_step_id not in ids:
                    raise WizardDefinitionError(
                        f"goto target not found: {step.id} -> {rule.goto_step_id}"
                    )
                targets.append(rule.goto_step_id)
            edges[step.id] = targets

        # transitions only move forward
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(node: str) -> None:
            if node in done:
                return
            if node in visiting:
                raise WizardDefinitionError(f"Step graph has a cycle through: {node}")
            visiting.add(node)
            for nxt in edges.get(node, []):
                visit(nxt)
            visiting.discard(node)
            done.add(node)

        for step_id in ids:
            visit(step_id)
