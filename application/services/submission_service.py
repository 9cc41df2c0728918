# application/services/submission_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from application.exceptions import NotificationError, SubmissionError
from application.outcome import DeliveryReport
from application.ports.http_client import HttpClientPort
from application.ports.logger import LoggerPort
from application.ports.notifier import NotifierPort
from application.ports.submission_outbox import SubmissionOutboxPort
from application.services.redactor import mask_dict
from domain.submission import FinalSubmission


@dataclass(frozen=True)
class SubmissionSettings:
    api_url: str
    api_key: str
    send_emails: bool = False


class SubmissionClient:
    """POST a FinalSubmission to the case-management API."""

    def __init__(self, http_client: HttpClientPort, settings: SubmissionSettings):
        self._http = http_client
        self._settings = settings

    def post(self, submission: FinalSubmission) -> int:
        if not self._settings.api_url:
            raise SubmissionError("Submission API URL is not configured")

        body = submission.to_json().encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "x-api-key": self._settings.api_key,
        }
        try:
            resp = self._http.request("POST", self._settings.api_url, headers=headers, body=body)
        except requests.RequestException as e:
            raise SubmissionError(f"Submission request failed: {e}") from e

        if not resp.ok:
            raise SubmissionError(f"Submission rejected with status {resp.status}", status=resp.status)
        return resp.status


class SubmissionService:
    """
    Deliver a completed journey: submit to the API, fall back to the outbox,
    then send the confirmation email.

    Raises SubmissionError only when the submission could neither be accepted
    nor queued.
    """

    def __init__(
        self,
        client: SubmissionClient,
        outbox: SubmissionOutboxPort,
        notifier: Optional[NotifierPort],
        settings: SubmissionSettings,
        logger: LoggerPort,
    ):
        self._client = client
        self._outbox = outbox
        self._notifier = notifier
        self._settings = settings
        self._logger = logger

    def deliver(self, submission: FinalSubmission) -> DeliveryReport:
        logger = self._logger.bind(submission_id=submission.submission_id)
        logger.debug("submission.payload", payload=mask_dict(submission.payload))

        status = "accepted"
        error_message: Optional[str] = None
        try:
            http_status = self._client.post(submission)
            logger.info("submission.accepted", status=http_status)
        except SubmissionError as e:
            error_message = str(e)
            logger.error("submission.failed", error=error_message, status=e.status)
            try:
                self._outbox.enqueue(submission, reason=error_message)
            except OSError as oe:
                logger.error("submission.queue_failed", error=str(oe))
                raise SubmissionError(f"Submission could not be queued: {oe}") from oe
            status = "queued"
            logger.info("submission.queued")

        email_sent = self._notify(submission, logger)
        return DeliveryReport(status=status, email_sent=email_sent, error_message=error_message)

    def _notify(self, submission: FinalSubmission, logger: LoggerPort) -> bool:
        if not self._settings.send_emails or self._notifier is None:
            logger.info("notify.skipped", reason="disabled")
            return False
        if not submission.notify_email:
            logger.info("notify.skipped", reason="no_email")
            return False

        try:
            self._notifier.send_email(
                submission.notify_email,
                personalisation={"firstName": submission.first_name},
                reference="",
            )
        except NotificationError as e:
            logger.error("notify.failed", error=str(e))
            return False

        logger.info("notify.sent")
        return True
