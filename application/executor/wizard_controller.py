# application/executor/wizard_controller.py
from __future__ import annotations

from application.exceptions import SubmissionError
from application.outcome import Completed, Continue, EarlyExit, Rejected, WizardOutcome
from application.ports.logger import LoggerPort
from application.services.answer_accumulator import AnswerAccumulator
from application.services.field_validator import FieldValidator
from application.services.submission_mapper import SubmissionMapper
from application.services.submission_service import SubmissionService
from application.services.transition_resolver import TransitionResolver
from domain.answers import SubmittedAnswers
from domain.wizard import WizardDefinition

GENERIC_SUBMISSION_ERROR = "We're sorry but something has gone wrong, please try again"


class WizardController:
    """
    Handle one step submission:
    validate -> (reject) | merge -> resolve -> continue / exit / map + deliver.
    """

    def __init__(
        self,
        wizard: WizardDefinition,
        validator: FieldValidator,
        accumulator: AnswerAccumulator,
        resolver: TransitionResolver,
        mapper: SubmissionMapper,
        submissions: SubmissionService,
        logger: LoggerPort,
    ):
        self._wizard = wizard
        self._validator = validator
        self._accumulator = accumulator
        self._resolver = resolver
        self._mapper = mapper
        self._submissions = submissions
        self._logger = logger

    def submit(self, step_id: str, raw_answers: SubmittedAnswers) -> WizardOutcome:
        step = self._wizard.get_step(step_id)
        logger = self._logger.bind(step_id=step.id)
        logger.info("wizard.step_submitted", fields=sorted(raw_answers.keys()))

        result = self._validator.validate_step(step, raw_answers)
        if not result.valid:
            logger.info("wizard.validation_failed", error_fields=sorted(result.errors.keys()))
            return Rejected(step_id=step.id, errors=result.errors, answers=raw_answers)

        previous = self._accumulator.decode(raw_answers, exclude=step.field_names)
        record = self._accumulator.merge_step(previous, step, result.cleaned)

        transition = self._resolver.resolve(step, record)
        logger.info(
            "wizard.transition",
            kind=transition.kind,
            to_step=transition.step_id,
            reason_code=transition.reason_code,
        )

        if transition.kind == "goto":
            return Continue(next_step=transition.step_id or "", record=record)

        if transition.kind == "exit":
            logger.info("wizard.early_exit", reason_code=transition.reason_code)
            return EarlyExit(reason_code=transition.reason_code or "", record=record)

        submission = self._mapper.to_final_submission(record)
        try:
            delivery = self._submissions.deliver(submission)
        except SubmissionError as e:
            logger.error("wizard.delivery_failed", error=str(e), submission_id=submission.submission_id)
            return Rejected(
                step_id=step.id,
                errors={},
                answers=self._accumulator.to_form(record),
                form_error=GENERIC_SUBMISSION_ERROR,
            )

        logger.info(
            "wizard.completed",
            submission_id=submission.submission_id,
            delivery=delivery.status,
            email_sent=delivery.email_sent,
        )
        return Completed(submission=submission, delivery=delivery)
