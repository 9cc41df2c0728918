# application/ports/notifier.py
from __future__ import annotations

from typing import Dict, Protocol


class NotifierPort(Protocol):
    def send_email(self, email_address: str, personalisation: Dict[str, str], reference: str = "") -> None:
        """
        Send the confirmation email. Raises NotificationError on failure.
        """
        ...
