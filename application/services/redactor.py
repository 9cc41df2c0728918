# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict

SENSITIVE_KEYS = {
    "x-api-key",
    "authorization",
    "cookie",
    "first_name",
    "last_name",
    "on_behalf_first_name",
    "on_behalf_last_name",
    "email",
    "email_address",
    "on_behalf_email_address",
    "on_behalf_contact_number",
    "contact_telephone_number",
    "contact_mobile_number",
    "dob_day",
    "dob_month",
    "dob_year",
    "address_first_line",
    "address_second_line",
    "address_third_line",
}


def mask_value(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_KEYS and value not in (None, ""):
        return "********"
    return value


def mask_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in d.items()}
