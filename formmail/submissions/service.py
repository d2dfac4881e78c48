"""Submission service for turning form posts into sent emails.

This module provides the SubmissionService class that orchestrates handling
of one submission: document rendering, a single transport call, and mapping
the outcome to the caller-facing result.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Union

from formmail.domain.models import ContactSubmission, JobApplicationSubmission
from formmail.logging import get_logger
from formmail.logging.context import log_context
from formmail.rendering.documents import DocumentRenderer
from formmail.rendering.exceptions import RenderingError
from formmail.transports.base import MailTransport
from formmail.transports.exceptions import TransportError
from formmail.utils.timestamps import utc_now

from .models import (
    FAILURE_MESSAGES,
    SUCCESS_MESSAGES,
    FormType,
    SubmissionResult,
    SubmissionStage,
)

logger = get_logger(__name__, component="submission")

Submission = Union[ContactSubmission, JobApplicationSubmission]


class SubmissionService:
    """Service for delivering validated form submissions.

    Coordinates the flow for one submission:
    1. Stamp the receipt time and assign a correlation id
    2. Render the notification document
    3. Send it through the transport, exactly once
    4. Map the outcome to a SubmissionResult

    Failures never propagate to the caller. They are logged with their full
    diagnostic and turned into a generic failure message with status 500.
    """

    def __init__(
        self,
        transport: MailTransport,
        renderer: DocumentRenderer,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize submission service.

        Args:
            transport: Mail transport used for every send
            renderer: Document renderer holding sender and recipient addresses
            clock: Source of the receipt timestamp
            logger_instance: Logger instance (uses module logger if None)
        """
        self.transport = transport
        self.renderer = renderer
        self.clock = clock
        self.logger = logger_instance or logger

    def submit_contact(
        self, submission: ContactSubmission, timeout: Optional[float] = None
    ) -> SubmissionResult:
        """Deliver a contact form submission.

        Args:
            submission: Validated contact form payload
            timeout: Deadline in seconds for the send call; the transport
                default applies when None
        """
        return self._submit(FormType.CONTACT, submission, timeout)

    def submit_job_application(
        self, submission: JobApplicationSubmission, timeout: Optional[float] = None
    ) -> SubmissionResult:
        """Deliver a job application with its attachments."""
        return self._submit(FormType.JOB_APPLICATION, submission, timeout)

    def _render(self, form: FormType, submission: Submission, received_at: datetime):
        if form is FormType.CONTACT:
            return self.renderer.render_contact(submission, received_at)
        return self.renderer.render_job_application(submission, received_at)

    def _submit(
        self, form: FormType, submission: Submission, timeout: Optional[float] = None
    ) -> SubmissionResult:
        submission_id = uuid.uuid4().hex
        received_at = self.clock()
        stage = SubmissionStage.PARSED

        with log_context(submission_id=submission_id, form=form.value):
            self.logger.info(
                f"Received {form.value} submission",
                extra={"event": "submission.received"},
            )

            try:
                document = self._render(form, submission, received_at)
                stage = SubmissionStage.RENDERED

                receipt = self.transport.send(document, timeout=timeout)
                stage = SubmissionStage.SENT

            except RenderingError as e:
                self.logger.error(
                    f"Rendering failed for {form.value} submission: {e}",
                    exc_info=True,
                    extra={"event": "submission.render.failed", "error_kind": "render"},
                )
                return self._failure(form, submission_id, stage, "render", str(e))

            except TransportError as e:
                self.logger.error(
                    f"Delivery failed for {form.value} submission ({e.kind.value}): "
                    f"{e.message}. Diagnostic: {e.diagnostic}",
                    extra={
                        "event": "transport.send.failed",
                        "transport": self.transport.name,
                        "error_kind": e.kind.value,
                        "status_code": e.status_code,
                        "diagnostic": e.diagnostic,
                    },
                )
                detail = f"{e.message}: {e.diagnostic}" if e.diagnostic else e.message
                return self._failure(form, submission_id, stage, e.kind.value, detail)

            except Exception as e:
                # Anything else must still produce a response
                self.logger.error(
                    f"Unexpected error handling {form.value} submission: {e}",
                    exc_info=True,
                    extra={"event": "submission.failed", "error_kind": "unexpected"},
                )
                return self._failure(form, submission_id, stage, "unexpected", str(e))

            self.logger.info(
                f"Sent {form.value} submission to {', '.join(document.recipients)}",
                extra={
                    "event": "submission.sent",
                    "transport": receipt.transport,
                    "message_id": receipt.message_id,
                    "attachment_count": len(document.attachments),
                },
            )

            return SubmissionResult(
                success=True,
                message=SUCCESS_MESSAGES[form],
                status_code=200,
                stage=stage,
                submission_id=submission_id,
                receipt=receipt,
            )

    @staticmethod
    def _failure(
        form: FormType,
        submission_id: str,
        stage: SubmissionStage,
        error_kind: str,
        error_detail: str,
    ) -> SubmissionResult:
        return SubmissionResult(
            success=False,
            message=FAILURE_MESSAGES[form],
            status_code=500,
            stage=stage,
            submission_id=submission_id,
            error_kind=error_kind,
            error_detail=error_detail,
        )
