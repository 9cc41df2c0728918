# infrastructure/wizard/base_loader.py
"""
Build a WizardDefinition from parsed wizard file data.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from domain.exceptions import WizardDefinitionError
from domain.steps import Condition, FieldKind, FieldRule, FieldSpec, StepDefinition, TransitionRule
from domain.submission import OutputField, SubmissionMapping
from domain.wizard import WizardDefinition, WizardMeta

_CONDITION_OPS = ("equals", "not_equals", "contains")
_DERIVES = ("text", "flag", "contains", "joined", "constant", "timestamp")


class WizardLoadError(Exception):
    pass


class WizardLoaderBase(ABC):
    def load_from_file(self, path: str) -> WizardDefinition:
        p = Path(path)
        if not p.exists():
            raise WizardLoadError(f"Wizard file not found: {path}")

        data = self._load_file(p)

        if data is None:
            raise WizardLoadError(f"Wizard file is empty: {path}")

        if not isinstance(data, dict):
            raise WizardLoadError(f"Wizard file is invalid: {path}")

        return self.load_from_dict(data)

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

    def load_from_dict(self, data: Dict[str, Any]) -> WizardDefinition:
        meta = self._load_meta(data.get("meta") or {})
        steps = [self._load_step(s) for s in data.get("steps") or []]
        submission = self._load_submission(data.get("submission") or {})
        try:
            return WizardDefinition(meta=meta, steps=steps, submission=submission)
        except WizardDefinitionError as e:
            raise WizardLoadError(str(e)) from e

    def _load_meta(self, data: Dict[str, Any]) -> WizardMeta:
        return WizardMeta(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            version=data.get("version", 1),
            description=data.get("description", ""),
        )

    def _load_step(self, data: Dict[str, Any]) -> StepDefinition:
        step_id = data.get("id")
        if not step_id:
            raise WizardLoadError("Step is missing an id")

        return StepDefinition(
            id=step_id,
            template=data.get("template") or step_id,
            fields=[self._load_field(step_id, f) for f in data.get("fields") or []],
            rules=[self._load_rule(step_id, r) for r in data.get("rules") or []],
            transitions=[self._load_transition(step_id, t) for t in data.get("transitions") or []],
        )

    def _load_field(self, step_id: str, data: Any) -> FieldSpec:
        # shorthand: a bare string is a text field
        if isinstance(data, str):
            return FieldSpec(name=data)

        kind_raw = str(data.get("kind", "text")).lower()
        try:
            kind = FieldKind(kind_raw)
        except ValueError as e:
            raise WizardLoadError(f"Unknown field kind: {step_id}.{data.get('name')} ({kind_raw})") from e

        return FieldSpec(
            name=data["name"],
            kind=kind,
            label=data.get("label", ""),
            options=list(data.get("options") or []),
        )

    def _load_rule(self, step_id: str, data: Dict[str, Any]) -> FieldRule:
        if not data.get("field") or not data.get("message"):
            raise WizardLoadError(f"Rule needs field and message: {step_id}")
        return FieldRule(
            field=data["field"],
            message=data["message"],
            check=data.get("check", "not_empty"),
            preprocess=list(data.get("preprocess") or []),
            only_if=data.get("only_if"),
        )

    def _load_transition(self, step_id: str, data: Dict[str, Any]) -> TransitionRule:
        when = self._load_condition(step_id, data.get("when"))
        targets = [k for k in ("goto", "exit", "complete") if data.get(k)]
        if len(targets) != 1:
            raise WizardLoadError(
                f"Transition needs exactly one of goto/exit/complete: {step_id}"
            )
        return TransitionRule(
            when=when,
            goto_step_id=data.get("goto"),
            exit_reason=str(data["exit"]) if data.get("exit") else None,
            complete=bool(data.get("complete")),
        )

    def _load_condition(self, step_id: str, data: Optional[Dict[str, Any]]) -> Optional[Condition]:
        if data is None:
            return None
        ops = [op for op in _CONDITION_OPS if op in data]
        if len(ops) != 1 or not data.get("field"):
            raise WizardLoadError(f"Condition needs field and one operator: {step_id}")
        op = ops[0]
        return Condition(field=data["field"], op=op, value=data[op])

    def _load_submission(self, data: Dict[str, Any]) -> SubmissionMapping:
        fields: List[OutputField] = []
        for row in data.get("fields") or []:
            derive = row.get("derive", "text")
            if derive not in _DERIVES:
                raise WizardLoadError(f"Unknown derive: {row.get('name')} ({derive})")
            sources = row.get("sources")
            if sources is None:
                sources = [row["source"]] if row.get("source") else [row["name"]]
            fields.append(
                OutputField(
                    name=row["name"],
                    derive=derive,
                    sources=list(sources),
                    token=row.get("token", ""),
                    value=row.get("value"),
                    on_behalf_only=bool(row.get("on_behalf_only", False)),
                )
            )

        defaults = SubmissionMapping()
        return SubmissionMapping(
            fields=fields,
            on_behalf_flag=data.get("on_behalf_flag", defaults.on_behalf_flag),
            on_behalf_email=data.get("on_behalf_email", defaults.on_behalf_email),
            self_email=data.get("self_email", defaults.self_email),
            first_name=data.get("first_name", defaults.first_name),
            list_separator=data.get("list_separator", defaults.list_separator),
        )
