"""Submission handling: render, send once, map the outcome."""

from .models import FormType, SubmissionResult, SubmissionStage
from .service import SubmissionService

__all__ = [
    "SubmissionService",
    "SubmissionResult",
    "SubmissionStage",
    "FormType",
]
