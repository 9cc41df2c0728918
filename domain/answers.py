# domain/answers.py
"""
Answer shapes shared by the wizard components.

SubmittedAnswers is the raw form input of one request. AccumulatedRecord is the
typed, growing record carried between steps by the client.
"""
from __future__ import annotations

from typing import Any, Dict, List, Set, Union

SubmittedAnswers = Dict[str, Union[str, List[str]]]
AccumulatedRecord = Dict[str, Any]


def as_token_list(value: Any) -> List[str]:
    """
    Normalise a multi-select value into an ordered list of tokens.
    A scalar becomes a one-element list; blanks and duplicates are dropped.
    """
    if value is None:
        return []
    items = value if isinstance(value, (list, tuple)) else [value]
    out: List[str] = []
    for item in items:
        token = "" if item is None else str(item).strip()
        if token and token not in out:
            out.append(token)
    return out


def as_token_set(value: Any) -> Set[str]:
    return set(as_token_list(value))
