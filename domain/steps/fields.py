# domain/steps/fields.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class FieldKind(str, Enum):
    TEXT = "text"
    CHOICE = "choice"
    YES_NO = "yes_no"
    CHECKBOX = "checkbox"
    MULTI = "multi"
    DATE_PART = "date_part"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.TEXT
    label: str = ""
    options: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FieldRule:
    """
    One check against one field.

    preprocess is applied in order before the check runs ("trim", "escape").
    only_if names a field that must be non-empty for the rule to run at all.
    """
    field: str
    message: str
    check: str = "not_empty"
    preprocess: List[str] = field(default_factory=list)
    only_if: Optional[str] = None
