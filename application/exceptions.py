# application/exceptions.py
from __future__ import annotations

from typing import Optional


class SubmissionError(Exception):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NotificationError(Exception):
    pass


class AuthorisationError(Exception):
    pass
