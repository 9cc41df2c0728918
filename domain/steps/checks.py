# domain/steps/checks.py
from __future__ import annotations

import html
import re
from typing import Any, Callable, Dict

# Same shape the GB postal-code validator in the form library accepts:
# outward code with an optional inward code, or the GIR 0AA special case.
_UK_POSTCODE_RE = re.compile(r"^(gir\s?0aa|[a-z]{1,2}\d[\da-z]?\s?(\d[a-z]{2})?)$", re.I)
_NUMERIC_RE = re.compile(r"^\d+$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return all(is_blank(v) for v in value)
    return str(value).strip() == ""


def not_empty(value: Any) -> bool:
    return not is_blank(value)


def uk_postcode(value: Any) -> bool:
    return _UK_POSTCODE_RE.match(_scalar(value)) is not None


def numeric(value: Any) -> bool:
    return _NUMERIC_RE.match(_scalar(value)) is not None


CHECKS: Dict[str, Callable[[Any], bool]] = {
    "not_empty": not_empty,
    "uk_postcode": uk_postcode,
    "numeric": numeric,
}


def trim(value: Any) -> Any:
    if isinstance(value, list):
        return [trim(v) for v in value]
    return "" if value is None else str(value).strip()


def escape(value: Any) -> Any:
    if isinstance(value, list):
        return [escape(v) for v in value]
    if value is None:
        return ""
    # "/" is escaped too, like the form library's escape() sanitizer
    return html.escape(str(value), quote=True).replace("/", "&#x2F;")


PREPROCESSORS: Dict[str, Callable[[Any], Any]] = {
    "trim": trim,
    "escape": escape,
}


def _scalar(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    return "" if value is None else str(value)
