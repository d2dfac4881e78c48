"""Result types for form submission handling."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from formmail.transports.base import DeliveryReceipt


class SubmissionStage(str, Enum):
    """Linear progression of a submission through the service."""

    RECEIVED = "received"
    PARSED = "parsed"
    RENDERED = "rendered"
    SENT = "sent"
    RESPONDED = "responded"


class FormType(str, Enum):
    CONTACT = "contact"
    JOB_APPLICATION = "job_application"


CONTACT_SUCCESS_MESSAGE = "Message sent successfully!"
CONTACT_FAILURE_MESSAGE = "Failed to send message"
JOB_APPLICATION_SUCCESS_MESSAGE = "Application submitted successfully!"
JOB_APPLICATION_FAILURE_MESSAGE = "Failed to submit application. Please try again."

SUCCESS_MESSAGES = {
    FormType.CONTACT: CONTACT_SUCCESS_MESSAGE,
    FormType.JOB_APPLICATION: JOB_APPLICATION_SUCCESS_MESSAGE,
}

FAILURE_MESSAGES = {
    FormType.CONTACT: CONTACT_FAILURE_MESSAGE,
    FormType.JOB_APPLICATION: JOB_APPLICATION_FAILURE_MESSAGE,
}


@dataclass
class SubmissionResult:
    """Outcome of handling one submission.

    Only success and message reach the caller. The remaining fields are for
    logs and tests.

    Attributes:
        success: Whether the provider accepted the message
        message: Caller-facing message
        status_code: HTTP status for the response
        stage: Last stage completed before responding
        submission_id: Server-side correlation id
        receipt: Provider receipt on success
        error_kind: Failure category on failure (e.g. "network", "render")
        error_detail: Full diagnostic on failure
    """

    success: bool
    message: str
    status_code: int
    stage: SubmissionStage
    submission_id: Optional[str] = None
    receipt: Optional[DeliveryReceipt] = None
    error_kind: Optional[str] = None
    error_detail: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        """Body returned to the caller."""
        return {"success": self.success, "message": self.message}

    @classmethod
    def invalid(cls, message: str) -> "SubmissionResult":
        """Result for a payload rejected before it reached the service."""
        return cls(
            success=False,
            message=message,
            status_code=400,
            stage=SubmissionStage.RECEIVED,
            error_kind="validation",
        )
