# infrastructure/notify/govuk_notify_notifier.py
from __future__ import annotations

from typing import Dict

import requests
from notifications_python_client.errors import APIError
from notifications_python_client.notifications import NotificationsAPIClient

from application.exceptions import NotificationError


class GovUkNotifyNotifier:
    """NotifierPort over the GOV.UK Notify client."""

    def __init__(self, api_key: str, template_id: str, timeout_sec: float = 10):
        self._client = NotificationsAPIClient(api_key, timeout=timeout_sec)
        self._template_id = template_id

    def send_email(self, email_address: str, personalisation: Dict[str, str], reference: str = "") -> None:
        try:
            self._client.send_email_notification(
                email_address=email_address,
                template_id=self._template_id,
                personalisation=personalisation,
                reference=reference,
            )
        except (APIError, requests.RequestException) as e:
            raise NotificationError(f"Notify send failed: {e}") from e
