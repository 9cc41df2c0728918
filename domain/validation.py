# domain/validation.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ValidationResult:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    cleaned: Dict[str, Any] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors

    def first_error(self, field_name: str) -> str:
        messages = self.errors.get(field_name) or []
        return messages[0] if messages else ""
