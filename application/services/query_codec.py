# application/services/query_codec.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlencode

from domain.answers import SubmittedAnswers

ERROR_SUFFIX = "_error"
FORM_ERROR_KEY = "error"


@dataclass(frozen=True)
class DecodedQuery:
    answers: SubmittedAnswers = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)
    form_error: Optional[str] = None


class QueryCodec:
    """
    Carry errors and answers through a redirect query string.

    - field errors are sent as "<field>_error=<message>", one pair per message
    - a form-level error is sent as "error=<message>"
    - list values expand to repeated keys: ("k", ["a", "b"]) => k=a&k=b
    """

    def encode(
        self,
        answers: SubmittedAnswers,
        errors: Optional[Dict[str, List[str]]] = None,
        form_error: Optional[str] = None,
    ) -> str:
        pairs: List[Tuple[str, str]] = []
        if form_error:
            pairs.append((FORM_ERROR_KEY, form_error))
        for name, messages in (errors or {}).items():
            for message in messages:
                pairs.append((f"{name}{ERROR_SUFFIX}", message))
        pairs.extend(self.expand(answers))
        return urlencode(pairs)

    def expand(self, answers: SubmittedAnswers) -> List[Tuple[str, str]]:
        out: List[Tuple[str, str]] = []
        for key, value in answers.items():
            if isinstance(value, list):
                for item in value:
                    out.append((key, "" if item is None else str(item)))
            else:
                out.append((key, "" if value is None else str(value)))
        return out

    def decode(self, items: Iterable[Tuple[str, Any]]) -> DecodedQuery:
        grouped: Dict[str, List[str]] = {}
        for key, value in items:
            grouped.setdefault(key, []).append("" if value is None else str(value))

        answers: Dict[str, Union[str, List[str]]] = {}
        errors: Dict[str, List[str]] = {}
        form_error: Optional[str] = None
        for key, values in grouped.items():
            if key == FORM_ERROR_KEY:
                form_error = values[0]
            elif key.endswith(ERROR_SUFFIX) and len(key) > len(ERROR_SUFFIX):
                errors[key[: -len(ERROR_SUFFIX)]] = values
            else:
                answers[key] = values[0] if len(values) == 1 else values
        return DecodedQuery(answers=answers, errors=errors, form_error=form_error)
